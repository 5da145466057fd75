from typing import List, Dict, Tuple, Optional

import config
from models import GameState, is_honor, suit_of, rank_of, sort_key

NO_SAFE_TILES = "场上尚无安全牌"
INSUFFICIENT_HAND = "请建立手牌"

OPPONENT_SEATS = (1, 2, 3)


class AnalysisEngine:
    """
    分析引擎：对当前状态只读，输出防守 (现物) 与进攻 (推荐打出) 两类建议
    """

    def __init__(self, min_tiles: int = config.MIN_ANALYSIS_TILES, top_n: int = config.OFFENSE_TOP_N):
        self.min_tiles = min_tiles
        self.top_n = top_n

    # --- 基础工具方法 ---
    @staticmethod
    def is_tile_safe(state: GameState, tile: int) -> bool:
        """该牌是否出现在任一对手 (座位 1-3) 的牌河中"""
        return any(tile in state.rivers[seat] for seat in OPPONENT_SEATS)

    @staticmethod
    def remaining_count(state: GameState, tile: int) -> int:
        """4 - (全部牌河 + 手牌 + 摸牌) 中的张数"""
        consumed = sum(river.count(tile) for river in state.rivers)
        consumed += state.hand.count(tile)
        if state.drawn_tile == tile:
            consumed += 1
        return config.MAX_COPIES - consumed

    @staticmethod
    def evaluate_tile(tile: int, pool: List[int]) -> int:
        """
        单张牌的保留价值评分，分数越低越适合打出
        字牌：刻子 200 / 对子 80 / 孤张 0
        数牌：基础 5 分，加上对子/刻子、搭子关系与中张加分，孤张幺九与二八扣分
        """
        count = pool.count(tile)

        # 1. 字牌
        if is_honor(tile):
            if count >= 3:
                return 200  # 刻子，绝对不打
            if count == 2:
                return 80  # 对子，保留
            return 0  # 孤张字牌，优先打

        suit, num = suit_of(tile), rank_of(tile)
        score = 5

        # 2. 对子 / 刻子
        if count >= 3:
            score += 200
        elif count == 2:
            score += 80

        # 3. 同花色的搭子关系，每张邻牌单独计分
        has_link = False
        for other in pool:
            if other == tile or is_honor(other) or suit_of(other) != suit:
                continue
            other_num = rank_of(other)
            diff = abs(num - other_num)
            if diff == 1:
                if {num, other_num} in ({1, 2}, {8, 9}):
                    score += 30  # 边张搭
                else:
                    score += 50  # 两面搭
                has_link = True
            elif diff == 2:
                score += 25  # 坎张搭
                has_link = True

        # 中张 (3-7) 本身更容易靠张
        if 3 <= num <= 7:
            score += 5

        # 既没有对子也没有搭子：彻底的孤张
        if not has_link and count == 1:
            if num in (1, 9):
                score -= 5
            elif num in (2, 8):
                score -= 2

        return score

    # --- 核心分析方法 ---

    def compute_safe_tiles(self, state: GameState) -> Tuple[List[Dict], Optional[str]]:
        """
        防守：对手打过的牌都视为现物 (自己的舍牌不算)
        返回 (按规范顺序排列的 [{'tile', 'remaining'}], 提示信息)
        """
        safe = set()
        for seat in OPPONENT_SEATS:
            safe.update(state.rivers[seat])

        if not safe:
            return [], NO_SAFE_TILES

        return [
            {'tile': tile, 'remaining': self.remaining_count(state, tile)}
            for tile in sorted(safe, key=sort_key)
        ], None

    def compute_offense_ranking(self, state: GameState) -> Tuple[List[Dict], Optional[str]]:
        """
        进攻：手牌 + 摸牌中每种不同的牌评分，取分数最低的前 top_n 种
        返回 ([{'tile', 'score', 'is_safe'}], 提示信息)
        """
        pool = state.pool()
        if len(pool) < self.min_tiles:
            return [], INSUFFICIENT_HAND

        scored = []
        seen = set()
        for tile in pool:
            if tile in seen:
                continue
            seen.add(tile)
            scored.append({'tile': tile, 'score': self.evaluate_tile(tile, pool)})

        # 稳定排序：同分时保持在手牌中的先后顺序
        scored.sort(key=lambda x: x['score'])

        ranking = scored[:self.top_n]
        for rec in ranking:
            rec['is_safe'] = self.is_tile_safe(state, rec['tile'])
        return ranking, None

    def analyze(self, state: GameState) -> Dict:
        """一次完整的分析，供渲染层读取"""
        safe_tiles, defense_msg = self.compute_safe_tiles(state)
        offense, offense_msg = self.compute_offense_ranking(state)
        return {
            'safe_tiles': safe_tiles,
            'defense_message': defense_msg,
            'offense': offense,
            'offense_message': offense_msg,
        }
