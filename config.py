"""
决策助手配置
"""

import os

# 规则表：16 张台湾麻将 / 13 张日麻
RULES = {
    16: {'hand_limit': 16, 'wall': 144},
    13: {'hand_limit': 13, 'wall': 136},
}
DEFAULT_RULE = 16

# 每种牌的物理张数
MAX_COPIES = 4

# 撤销栈深度
HISTORY_LIMIT = 20

# 分析参数
MIN_ANALYSIS_TILES = 5
OFFENSE_TOP_N = 3
DEFENSE_DISPLAY_LIMIT = 8

# 严格模式：记录舍牌或加入手牌时校验同种牌不超过 4 张 (默认宽松，信任手动输入)
STRICT_TILE_COUNT = os.environ.get('MJ_STRICT', '0').lower() in ('1', 'true', 'yes')

# 网络配置
HOST = '0.0.0.0'
PORT = int(os.environ.get('PORT', 5000))

LOG_LEVEL = os.environ.get('MJ_LOG_LEVEL', 'INFO').upper()
