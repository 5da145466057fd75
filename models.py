import copy
from typing import List, Optional, Union

import config


class TileConst:
    """
    常量类：为了代码可读性，定义牌种索引
    0-8: 万 (1m-9m)
    9-17: 筒 (1p-9p)
    18-26: 索 (1s-9s)
    27-33: 字牌 (东 南 西 北 白 发 中)
    """
    MAN, PIN, SOU, HONOR = 0, 1, 2, 3
    EAST, SOUTH, WEST, NORTH = 27, 28, 29, 30
    HAKU, HATSU, CHUN = 31, 32, 33

    KINDS = 34
    HONORS = tuple(range(27, 34))


def is_honor(tile_id: int) -> bool:
    return tile_id >= 27


def suit_of(tile_id: int) -> int:
    """花色编号: 0万 1筒 2索 3字"""
    return tile_id // 9 if tile_id < 27 else TileConst.HONOR


def rank_of(tile_id: int) -> int:
    """数牌返回 1-9，字牌返回 1-7 (东南西北白发中)"""
    if tile_id < 27:
        return tile_id % 9 + 1
    return tile_id - 27 + 1


# 理牌时字牌的先后: 东 南 西 北 中 发 白
HONOR_SORT_ORDER = (TileConst.EAST, TileConst.SOUTH, TileConst.WEST, TileConst.NORTH,
                    TileConst.CHUN, TileConst.HATSU, TileConst.HAKU)


def sort_key(tile_id: int):
    """规范排序：花色 (万 筒 索 字) 优先，其次点数；字牌按东南西北中发白"""
    if is_honor(tile_id):
        return TileConst.HONOR, HONOR_SORT_ORDER.index(tile_id)
    return suit_of(tile_id), rank_of(tile_id)


class Meld:
    """
    副露类：记录吃、碰、杠的信息 (仅作为数据结构保留，不参与评分)
    """

    def __init__(self, meld_type: str, tiles: List[int]):
        # type 包含: 'chi' (吃), 'pon' (碰), 'kan' (大明杠/加杠), 'ankan' (暗杠)
        self.type = meld_type
        self.tiles = tiles

    def to_dict(self):
        return {"type": self.type, "tiles": list(self.tiles)}


class BuildHand:
    """输入模式：建立手牌 / 输入摸到的牌"""
    name = 'hand'

    def __eq__(self, other):
        return isinstance(other, BuildHand)

    def __hash__(self):
        return hash(self.name)

    def __repr__(self):
        return "BuildHand()"


class RecordDiscard:
    """输入模式：记录某位对手的舍牌，座位只在该模式下有意义"""
    name = 'record'

    def __init__(self, seat: int):
        self.seat = seat

    def __eq__(self, other):
        return isinstance(other, RecordDiscard) and other.seat == self.seat

    def __hash__(self):
        return hash((self.name, self.seat))

    def __repr__(self):
        return f"RecordDiscard(seat={self.seat})"


Mode = Union[BuildHand, RecordDiscard]


class GameState:
    """
    全局状态类：维护一个会话内全部可观察的牌局信息
    座位 0 是自己，1 下家，2 对家，3 上家
    """

    def __init__(self, rule: int = config.DEFAULT_RULE):
        if rule not in config.RULES:
            raise ValueError(f"不支持的规则: {rule} (可选 {sorted(config.RULES)})")
        self.rule: int = rule
        self.hand_limit: int = config.RULES[rule]['hand_limit']
        self.wall_count: int = config.RULES[rule]['wall']

        # 手牌：牌 ID 列表，始终保持规范排序
        self.hand: List[int] = []
        self.drawn_tile: Optional[int] = None

        self.rivers: List[List[int]] = [[] for _ in range(4)]
        self.melds: List[List[Meld]] = [[] for _ in range(4)]

        # 全局舍牌计数器：长度 34，索引为牌 ID，值为出现在任意牌河中的张数
        self.tile_counts: List[int] = [0] * TileConst.KINDS

        self.mode: Mode = BuildHand()

    @property
    def selected_seat(self) -> Optional[int]:
        return self.mode.seat if isinstance(self.mode, RecordDiscard) else None

    def pool(self) -> List[int]:
        """可供打出的全部牌：手牌 + 摸到的牌"""
        tiles = list(self.hand)
        if self.drawn_tile is not None:
            tiles.append(self.drawn_tile)
        return tiles

    def sort_hand(self):
        self.hand.sort(key=sort_key)

    def visible_count(self, tile_id: int) -> int:
        """某种牌在手牌、摸牌、全部牌河与副露中的总张数"""
        count = self.tile_counts[tile_id] + self.hand.count(tile_id)
        if self.drawn_tile == tile_id:
            count += 1
        for seat_melds in self.melds:
            for meld in seat_melds:
                count += meld.tiles.count(tile_id)
        return count

    def copy(self) -> 'GameState':
        return copy.deepcopy(self)

    def to_dict(self):
        return {
            "rule": self.rule,
            "hand_limit": self.hand_limit,
            "wall_count": self.wall_count,
            "hand": list(self.hand),
            "drawn_tile": self.drawn_tile,
            "rivers": [list(r) for r in self.rivers],
            "melds": [[m.to_dict() for m in seat] for seat in self.melds],
            "tile_counts": list(self.tile_counts),
            "mode": self.mode.name,
            "selected_seat": self.selected_seat,
        }
