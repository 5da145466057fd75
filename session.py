import logging
from contextlib import contextmanager
from typing import List, Dict, Optional, Union

import config
from engine import AnalysisEngine
from errors import AssistantError, InvalidInputState, TileNotFound, TileOverflow, InvalidSeat
from history import HistoryManager
from models import GameState, BuildHand, RecordDiscard, Mode
from utils import to_tile_id, parse_tiles, id_to_str, id_to_code, SEAT_NAMES

logger = logging.getLogger(__name__)

HINT_BUILD_HAND = "请点选键盘，建立或添加手牌"
HINT_DRAW = "请点选键盘，输入您摸到的牌"
HINT_DRAWN = "摸牌成功！请选择一张手牌打出"
HINT_YOUR_TURN = "轮到您了？请摸牌或吃碰"


def _mode_hint(mode: Mode) -> str:
    if isinstance(mode, RecordDiscard):
        return f"正在记录 {SEAT_NAMES[mode.seat]} 的舍牌"
    return HINT_BUILD_HAND


class AssistantSession:
    """
    一局决策助手会话：持有唯一的 GameState 与撤销栈
    所有修改都先快照、再改状态、最后重新分析
    """

    def __init__(self, rule: int = config.DEFAULT_RULE, strict: bool = config.STRICT_TILE_COUNT):
        self.engine = AnalysisEngine()
        self.history = HistoryManager()
        self.strict = strict
        self.state = GameState(rule)
        self.hint = HINT_BUILD_HAND
        self.analysis: Dict = {}
        self._in_batch = False
        self.reset(rule)

    # --- 会话生命周期 ---
    def reset(self, rule: Optional[int] = None):
        """重置整局 (清空撤销栈)，rule 为 None 时沿用当前规则"""
        self.state = GameState(self.state.rule if rule is None else rule)
        self.history.clear()
        self.hint = HINT_BUILD_HAND
        logger.info("session reset: rule=%d wall=%d", self.state.rule, self.state.wall_count)
        self._refresh()

    def undo(self) -> bool:
        """撤销一步；没有历史时什么也不做"""
        previous = self.history.pop()
        if previous is None:
            return False
        self.state = previous
        self.hint = _mode_hint(self.state.mode)
        logger.info("undo: %d step(s) left", len(self.history))
        self._refresh()
        return True

    @contextmanager
    def _transaction(self):
        """操作前快照；操作失败时撤回本次快照，状态保持不变"""
        token = self.history.snapshot(self.state)
        try:
            yield
        except AssistantError:
            self.history.discard(token)
            raise
        if not self._in_batch:
            self.history.commit()
        self._refresh()

    def _refresh(self):
        self.analysis = self.engine.analyze(self.state)

    # --- 输入入口 ---
    def submit_tile_input(self, tile: Union[int, str]):
        """键盘点牌：按当前模式记录舍牌或加入手牌"""
        tile_id = to_tile_id(tile)
        if isinstance(self.state.mode, RecordDiscard):
            self.record_discard(self.state.mode.seat, tile_id)
        else:
            self.add_tile_to_hand(tile_id)

    def submit_tiles(self, text: str) -> int:
        """
        批量输入天凤写法，例如 '123m44z'，按输入顺序逐张处理，每张牌都是独立的一步。
        任意一张失败时整批撤回 (状态、提示与撤销栈都恢复原样)
        """
        tiles = parse_tiles(text)
        saved_state, saved_hint = self.state.copy(), self.hint
        mark = self.history.mark()
        self._in_batch = True
        try:
            for tile_id in tiles:
                self.submit_tile_input(tile_id)
        except AssistantError:
            self.history.rollback(mark)
            self.state, self.hint = saved_state, saved_hint
            self._refresh()
            raise
        finally:
            self._in_batch = False
        self.history.commit()
        return len(tiles)

    # --- 动作 ---
    def record_discard(self, seat: int, tile: Union[int, str]):
        """记录对手舍牌 (不校验对手是否真有这张牌)"""
        if seat not in (1, 2, 3):
            raise InvalidSeat(f"只能记录对手 (1-3) 的舍牌: {seat}")
        tile_id = to_tile_id(tile)
        with self._transaction():
            self._check_copies(tile_id)
            state = self.state
            state.rivers[seat].append(tile_id)
            state.tile_counts[tile_id] += 1
            state.wall_count -= 1
            if seat == 3:
                # 上家打牌后可能轮到自己
                self.hint = HINT_YOUR_TURN
            logger.debug("seat %d discarded %s, wall=%d", seat, id_to_code(tile_id), state.wall_count)

    def add_tile_to_hand(self, tile: Union[int, str]):
        """加入手牌；手牌已满时视为摸牌"""
        tile_id = to_tile_id(tile)
        with self._transaction():
            state = self.state
            if not isinstance(state.mode, BuildHand):
                raise InvalidInputState("当前为记录舍牌模式，请先切换到手牌模式")
            if state.drawn_tile is not None:
                raise InvalidInputState("手牌已满 (+1摸牌)，请先打出一张牌！")
            self._check_copies(tile_id)

            if len(state.hand) < state.hand_limit:
                state.hand.append(tile_id)
                state.sort_hand()
                self.hint = f"手牌 {len(state.hand)}/{state.hand_limit}"
            else:
                state.drawn_tile = tile_id
                state.wall_count -= 1
                self.hint = HINT_DRAWN
            logger.debug("hand +%s (%d/%d)", id_to_code(tile_id), len(state.hand), state.hand_limit)

    def discard(self, tile: Union[int, str]):
        """从摸牌或手牌中打出一张，摸到的牌随即并入手牌"""
        tile_id = to_tile_id(tile)
        with self._transaction():
            state = self.state
            if state.drawn_tile == tile_id:
                state.drawn_tile = None
            elif tile_id in state.hand:
                state.hand.remove(tile_id)
                if state.drawn_tile is not None:
                    state.hand.append(state.drawn_tile)
                    state.drawn_tile = None
                    state.sort_hand()
            else:
                raise TileNotFound(f"手牌中没有 {id_to_str(tile_id)}")

            state.rivers[0].append(tile_id)
            state.tile_counts[tile_id] += 1
            logger.debug("self discarded %s", id_to_code(tile_id))

    def retract_discard(self, seat: int, index: int):
        """移除误记的舍牌，该牌回到未见牌中 (牌墙 +1)。调用前由界面层负责确认"""
        if seat not in (0, 1, 2, 3):
            raise InvalidSeat(f"座位越界: {seat}")
        with self._transaction():
            state = self.state
            river = state.rivers[seat]
            if not 0 <= index < len(river):
                raise TileNotFound(f"{SEAT_NAMES[seat]}牌河中没有第 {index + 1} 张牌")
            tile_id = river.pop(index)
            state.tile_counts[tile_id] -= 1
            state.wall_count += 1
            logger.debug("retracted %s from seat %d", id_to_code(tile_id), seat)

    # --- 模式切换 ---
    def switch_mode(self, mode: Mode):
        """切换输入模式；模式未变化时不产生历史记录"""
        if isinstance(mode, RecordDiscard) and (isinstance(mode.seat, bool) or mode.seat not in (1, 2, 3)):
            raise InvalidSeat(f"只能记录对手 (1-3) 的舍牌: {mode.seat}")
        if mode != self.state.mode:
            with self._transaction():
                self.state.mode = mode
        self.hint = _mode_hint(mode)

    def select_seat(self, seat: int):
        """点选对手：强制进入记录模式"""
        self.switch_mode(RecordDiscard(seat))

    def draw(self):
        """“我摸牌”：切换到手牌模式，等待输入摸到的牌"""
        self.switch_mode(BuildHand())
        self.hint = HINT_DRAW

    def _check_copies(self, tile_id: int):
        if self.strict and self.state.visible_count(tile_id) >= config.MAX_COPIES:
            raise TileOverflow(f"{id_to_str(tile_id)} 已经出现 {config.MAX_COPIES} 张了")

    # --- 只读查询 ---
    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def hand_limit(self) -> int:
        return self.state.hand_limit

    @property
    def safe_tiles(self) -> List[Dict]:
        return self.analysis['safe_tiles']

    @property
    def defense_message(self) -> Optional[str]:
        return self.analysis['defense_message']

    @property
    def offense(self) -> List[Dict]:
        return self.analysis['offense']

    @property
    def offense_message(self) -> Optional[str]:
        return self.analysis['offense_message']

    def snapshot(self) -> GameState:
        """当前状态的独立副本，供渲染层读取"""
        return self.state.copy()

    def state_dict(self) -> Dict:
        """JSON 友好的完整视图：状态 + 分析结果 + 提示"""
        data = self.state.to_dict()
        data.update({
            "hand_codes": [id_to_code(t) for t in self.state.hand],
            "drawn_code": id_to_code(self.state.drawn_tile) if self.state.drawn_tile is not None else None,
            "can_undo": self.can_undo,
            "hint": self.hint,
            "safe_tiles": [dict(rec, code=id_to_code(rec['tile']), name=id_to_str(rec['tile']))
                           for rec in self.safe_tiles],
            "defense_message": self.defense_message,
            "offense": [dict(rec, code=id_to_code(rec['tile']), name=id_to_str(rec['tile']))
                        for rec in self.offense],
            "offense_message": self.offense_message,
        })
        return data
