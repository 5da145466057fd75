import unittest
import sys
import os

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from engine import AnalysisEngine, NO_SAFE_TILES, INSUFFICIENT_HAND
from models import GameState, TileConst
from utils import parse_tiles, str_to_id


class TestEvaluateTile(unittest.TestCase):
    def score(self, tile, pool):
        return AnalysisEngine.evaluate_tile(str_to_id(tile), parse_tiles(pool))

    def test_honors(self):
        self.assertEqual(self.score("1z", "111z"), 200)
        self.assertEqual(self.score("東", "11z123m"), 80)
        self.assertEqual(self.score("7z", "7z123m"), 0)

    def test_triple_and_isolates(self):
        pool = "111m5p9s"
        self.assertEqual(self.score("1m", pool), 205)
        self.assertEqual(self.score("9s", pool), 0)
        self.assertEqual(self.score("5p", pool), 10)

    def test_pair(self):
        self.assertEqual(self.score("5m", "55m"), 90)
        self.assertEqual(self.score("1m", "11m"), 85)

    def test_shapes(self):
        self.assertEqual(self.score("4m", "45m"), 60)   # 两面
        self.assertEqual(self.score("1m", "12m"), 35)   # 边张
        self.assertEqual(self.score("9p", "89p"), 35)
        self.assertEqual(self.score("4m", "46m"), 35)   # 坎张
        self.assertEqual(self.score("1m", "14m"), 0)    # 隔三张不算搭子

    def test_each_neighbour_copy_counts(self):
        self.assertEqual(self.score("4m", "455m"), 110)

    def test_other_suit_does_not_link(self):
        self.assertEqual(self.score("1m", "1m2p"), 0)
        self.assertEqual(self.score("2s", "2s1m3m"), 3)
        self.assertEqual(self.score("8p", "8p1z"), 3)

    def test_deterministic(self):
        pool = parse_tiles("123445m67p11z")
        first = [AnalysisEngine.evaluate_tile(t, pool) for t in pool]
        second = [AnalysisEngine.evaluate_tile(t, list(pool)) for t in pool]
        self.assertEqual(first, second)


class TestDefense(unittest.TestCase):
    def setUp(self):
        self.engine = AnalysisEngine()
        self.state = GameState()

    def test_no_safe_tiles(self):
        self.state.rivers[0].append(3)
        self.assertEqual(self.engine.compute_safe_tiles(self.state), ([], NO_SAFE_TILES))

    def test_single_safe_tile(self):
        tile = str_to_id("3p")
        self.state.rivers[1].append(tile)
        safe, msg = self.engine.compute_safe_tiles(self.state)
        self.assertIsNone(msg)
        self.assertEqual(safe, [{'tile': tile, 'remaining': 3}])

    def test_remaining_counts_hand_drawn_and_all_rivers(self):
        tile = str_to_id("5s")
        self.state.rivers[2].append(tile)
        self.state.rivers[0].append(tile)
        self.state.hand = [tile]
        self.state.drawn_tile = tile
        safe, _ = self.engine.compute_safe_tiles(self.state)
        self.assertEqual(safe[0]['remaining'], 0)

    def test_sorted_and_deduplicated(self):
        self.state.rivers[3] += [TileConst.EAST, 20, 2]
        self.state.rivers[1] += [20]
        safe, _ = self.engine.compute_safe_tiles(self.state)
        self.assertEqual([rec['tile'] for rec in safe], [2, 20, TileConst.EAST])

    def test_is_tile_safe_ignores_self(self):
        self.state.rivers[0].append(7)
        self.assertFalse(self.engine.is_tile_safe(self.state, 7))
        self.state.rivers[2].append(7)
        self.assertTrue(self.engine.is_tile_safe(self.state, 7))


class TestOffense(unittest.TestCase):
    def setUp(self):
        self.engine = AnalysisEngine()
        self.state = GameState()

    def test_insufficient_hand(self):
        self.state.hand = parse_tiles("1234m")
        self.assertEqual(self.engine.compute_offense_ranking(self.state), ([], INSUFFICIENT_HAND))

    def test_drawn_tile_joins_pool(self):
        self.state.hand = parse_tiles("1234m")
        self.state.drawn_tile = str_to_id("9s")
        ranking, msg = self.engine.compute_offense_ranking(self.state)
        self.assertIsNone(msg)
        self.assertEqual(ranking[0]['tile'], str_to_id("9s"))

    def test_ranking_scenario(self):
        self.state.hand = parse_tiles("111m5p9s")
        self.state.rivers[1].append(str_to_id("5p"))
        ranking, msg = self.engine.compute_offense_ranking(self.state)
        self.assertIsNone(msg)
        self.assertEqual(ranking, [
            {'tile': str_to_id("9s"), 'score': 0, 'is_safe': False},
            {'tile': str_to_id("5p"), 'score': 10, 'is_safe': True},
            {'tile': str_to_id("1m"), 'score': 205, 'is_safe': False},
        ])

    def test_top_three_distinct(self):
        self.state.hand = parse_tiles("19m19p19s1234z")
        ranking, _ = self.engine.compute_offense_ranking(self.state)
        tiles = [rec['tile'] for rec in ranking]
        self.assertEqual(len(tiles), 3)
        self.assertEqual(len(set(tiles)), 3)
        # 同分时保持手牌顺序
        self.assertEqual(tiles, parse_tiles("19m1p"))

    def test_analysis_is_read_only(self):
        self.state.hand = parse_tiles("123456m")
        self.state.rivers[1].append(30)
        before = self.state.to_dict()
        self.engine.analyze(self.state)
        self.assertEqual(self.state.to_dict(), before)


if __name__ == '__main__':
    unittest.main()
