from flask import Flask, request, jsonify
from errors import AssistantError
from models import BuildHand, RecordDiscard
from session import AssistantSession
import config
import traceback

app = Flask(__name__)

# 全局变量存储当前会话 (单人单会话)
session = AssistantSession()


def _ok():
    return jsonify(session.state_dict())


def _run(action, *args):
    """执行一个会话动作，统一错误处理"""
    try:
        action(*args)
        return _ok()
    except AssistantError as e:
        return jsonify({"error": e.message, "state": session.state_dict()}), 400
    except Exception as e:
        traceback.print_exc()
        return jsonify({"error": str(e)}), 500


def _payload():
    return request.get_json(silent=True) or {}


@app.route('/api/state', methods=['GET'])
def get_state():
    return _ok()


@app.route('/api/reset', methods=['POST'])
def reset():
    rule = _payload().get('rule', config.DEFAULT_RULE)
    if rule not in config.RULES:
        return jsonify({"error": f"不支持的规则: {rule}"}), 400
    return _run(session.reset, rule)


@app.route('/api/input', methods=['POST'])
def submit_input():
    data = _payload()
    if 'tiles' in data:
        return _run(session.submit_tiles, data['tiles'])
    return _run(session.submit_tile_input, data.get('tile'))


@app.route('/api/discard', methods=['POST'])
def discard():
    return _run(session.discard, _payload().get('tile'))


@app.route('/api/retract', methods=['POST'])
def retract():
    data = _payload()
    try:
        seat, index = int(data['seat']), int(data['index'])
    except (KeyError, TypeError, ValueError):
        return jsonify({"error": "需要 seat 与 index"}), 400
    return _run(session.retract_discard, seat, index)


@app.route('/api/undo', methods=['POST'])
def undo():
    session.undo()
    return _ok()


@app.route('/api/mode', methods=['POST'])
def switch_mode():
    data = _payload()
    mode = data.get('mode')
    if mode == 'hand':
        return _run(session.switch_mode, BuildHand())
    if mode == 'record':
        seat = data.get('seat', session.state.selected_seat or 3)
        return _run(session.switch_mode, RecordDiscard(seat))
    return jsonify({"error": f"未知模式: {mode}"}), 400


@app.route('/api/seat', methods=['POST'])
def select_seat():
    seat = _payload().get('seat')
    if isinstance(seat, bool) or not isinstance(seat, int):
        return jsonify({"error": f"座位无效: {seat}"}), 400
    return _run(session.select_seat, seat)


@app.route('/api/draw', methods=['POST'])
def draw():
    return _run(session.draw)


if __name__ == '__main__':
    # 生产环境通常由 gunicorn 启动，但保留此逻辑方便本地调试
    app.run(host=config.HOST, port=config.PORT)
