import re
from typing import List

from mahjong.tile import TilesConverter

import config
from errors import InvalidTile
from models import TileConst

SUIT_LETTERS = ['m', 'p', 's', 'z']
SUIT_NAMES = ['万', '筒', '索']
HONOR_NAMES = ["东", "南", "西", "北", "白", "发", "中"]

# 字牌的汉字写法 (繁简皆可) -> 牌 ID
HONOR_GLYPHS = {
    '東': 27, '东': 27, '南': 28, '西': 29, '北': 30,
    '白': 31, '發': 32, '发': 32, '中': 33,
}

SEAT_NAMES = ['自己', '下家', '对家', '上家']

_TENHOU_RE = re.compile(r'^(?:[0-9]+[mps]|[1-7]+[zh])+$')


def parse_tiles(hand_str: str) -> List[int]:
    """
    将天凤格式的字符串解析为牌的 ID 列表 (保持输入顺序)。
    支持的格式例如: '123m456p789s1122z'，0m/0p/0s 视为赤五
    m: 万(0-8), p: 筒(9-17), s: 索(18-26), z: 字牌(27-33, 1-7分别对应东南西北白发中)
    """
    text = hand_str.strip().lower().replace(' ', '')
    if not text or not _TENHOU_RE.match(text):
        raise InvalidTile(f"无法识别的牌: {hand_str!r}")

    result = []
    current_numbers = []
    offsets = {'m': 0, 'p': 9, 's': 18, 'z': 27, 'h': 27}
    for char in text:
        if char.isdigit():
            # 赤五按普通五处理
            current_numbers.append(int(char) or 5)
            continue
        for num in current_numbers:
            result.append(num - 1 + offsets[char])
        current_numbers = []

    if any(result.count(tile_id) > config.MAX_COPIES for tile_id in set(result)):
        raise InvalidTile(f"同一种牌最多 {config.MAX_COPIES} 张: {hand_str!r}")
    return result


def str_to_id(tile: str) -> int:
    """
    单张牌的写法转换为牌 ID。
    例如: '1m' -> 0, '5z' -> 31, '東' -> 27
    """
    text = tile.strip()
    if text in HONOR_GLYPHS:
        return HONOR_GLYPHS[text]
    tiles = parse_tiles(text)
    if len(tiles) != 1:
        raise InvalidTile(f"请输入单张牌: {tile!r}")
    return tiles[0]


def to_tile_id(tile) -> int:
    """接受牌 ID 或字符串写法"""
    if isinstance(tile, bool):
        raise InvalidTile(f"无法识别的牌: {tile!r}")
    if isinstance(tile, int):
        if 0 <= tile < TileConst.KINDS:
            return tile
        raise InvalidTile(f"牌 ID 越界: {tile}")
    if isinstance(tile, str):
        return str_to_id(tile)
    raise InvalidTile(f"无法识别的牌: {tile!r}")


def id_to_code(tile_id: int) -> str:
    """牌 ID -> 短写法，例如 0 -> '1m', 27 -> '1z'"""
    if tile_id < 27:
        return f"{tile_id % 9 + 1}{SUIT_LETTERS[tile_id // 9]}"
    return f"{tile_id - 27 + 1}z"


def id_to_str(tile_id: int) -> str:
    """
    将单个内部牌 ID (0-33) 转换为人类可读的中文全称。
    例如: 0 -> '1万', 27 -> '东'
    """
    if tile_id < 0 or tile_id > 33:
        return "未知牌"
    if tile_id < 27:
        return f"{tile_id % 9 + 1}{SUIT_NAMES[tile_id // 9]}"
    return HONOR_NAMES[tile_id - 27]


def tiles_to_tenhou_str(tiles: List[int]) -> str:
    """
    将牌 ID 列表转换回天凤格式的字符串，例如 [0, 1, 2, 27, 27] -> '123m11z'
    在记录日志、终端展示时使用。
    """
    if not tiles:
        return ""
    tiles_34 = [0] * TileConst.KINDS
    for tile_id in tiles:
        # 宽松模式下可能录入超过 4 张，展示时截断
        tiles_34[tile_id] = min(tiles_34[tile_id] + 1, config.MAX_COPIES)
    return TilesConverter.to_one_line_string(TilesConverter.to_136_array(tiles_34))
