import logging
import os

import config
from errors import AssistantError, InvalidSeat
from session import AssistantSession
from utils import id_to_str, tiles_to_tenhou_str, SEAT_NAMES


def clear_screen():
    """清空控制台屏幕，保持界面整洁"""
    os.system('cls' if os.name == 'nt' else 'clear')


HELP = """输入格式说明：
 - 直接输入牌: 按当前模式记录舍牌或加入手牌 (如: 5m 或 123m44z)
 - 字牌: 1-7z (1-4对应东南西北，5-7对应白发中)，也可直接输入 東 南 西 北 白 發 中
 - d <牌>    : 打出一张牌 (如: d 9s)
 - s <1-3>   : 选择对手并进入记录模式 (1下家 2对家 3上家)
 - draw      : 我摸牌 (切换到手牌模式)
 - r <座位> <序号>: 移除误记的舍牌 (序号从 1 开始)
 - u         : 撤销
 - reset [13|16]: 重置
 - q         : 退出"""


def print_board(session: AssistantSession):
    state = session.state
    print("-" * 50)
    print(f"🀫 牌墙剩余: {state.wall_count}    模式: {'手牌' if state.selected_seat is None else '记录 ' + SEAT_NAMES[state.selected_seat]}")
    for seat in (1, 2, 3, 0):
        river = ' '.join(id_to_str(t) for t in state.rivers[seat])
        print(f"  {SEAT_NAMES[seat]}: {river}")
    drawn = f"  + {id_to_str(state.drawn_tile)}" if state.drawn_tile is not None else ""
    print(f"✋ 手牌 ({len(state.hand)}/{state.hand_limit}): {tiles_to_tenhou_str(state.hand)}{drawn}")

    print("🛡️ 防守建议:")
    if session.defense_message:
        print(f"    {session.defense_message}")
    for rec in session.safe_tiles[:config.DEFENSE_DISPLAY_LIMIT]:
        print(f"    {id_to_str(rec['tile'])}  现物 (剩 {rec['remaining']} 张)")

    print("⚔️ 进攻建议:")
    if session.offense_message:
        print(f"    {session.offense_message}")
    for idx, rec in enumerate(session.offense):
        rank_icon = "🥇" if idx == 0 else "🥈" if idx == 1 else "🥉"
        safety = "安全" if rec['is_safe'] else "危险(生)"
        print(f"    {rank_icon} 打出 【 {id_to_str(rec['tile'])} 】 {safety} / 评分:{rec['score']}")

    print(f"💡 {session.hint}")


def handle_command(session: AssistantSession, line: str) -> bool:
    """执行一行命令，返回 False 表示退出"""
    parts = line.split()
    cmd = parts[0].lower()

    if cmd == 'q':
        return False
    if cmd in ('h', 'help', '?'):
        print(HELP)
    elif cmd == 'u':
        if not session.undo():
            print("没有可以撤销的操作")
    elif cmd == 'reset':
        session.reset(int(parts[1]) if len(parts) > 1 else None)
    elif cmd == 'draw':
        session.draw()
    elif cmd == 'd' and len(parts) == 2:
        session.discard(parts[1])
    elif cmd == 's' and len(parts) == 2:
        session.select_seat(int(parts[1]))
    elif cmd == 'r' and len(parts) == 3:
        seat, index = int(parts[1]), int(parts[2]) - 1
        if seat not in range(len(SEAT_NAMES)):
            raise InvalidSeat(f"座位越界: {seat}")
        if input(f"移除{SEAT_NAMES[seat]}的第 {index + 1} 张舍牌？(y/n) ").strip().lower() == 'y':
            session.retract_discard(seat, index)
    elif len(parts) == 1:
        if len(parts[0]) <= 2:
            session.submit_tile_input(parts[0])
        else:
            session.submit_tiles(parts[0])
    else:
        print("无法识别的命令，输入 h 查看帮助")
    return True


def interactive_loop():
    session = AssistantSession()

    clear_screen()
    print("=" * 50)
    print("麻将决策助手终端 v2.0")
    print("=" * 50)
    print(HELP)

    while True:
        print_board(session)
        try:
            line = input("\n👉 ").strip()
            if not line:
                continue
            if not handle_command(session, line):
                print("感谢使用，祝你把把自摸！")
                break
        except AssistantError as e:
            print(f"⚠️ {e.message}")
        except ValueError as e:
            print(f"\n❌ 解析出错，请检查输入格式是否正确！")
            print(f"错误信息: {e}")


if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    interactive_loop()
