class AssistantError(ValueError):
    """所有可恢复的操作错误的基类，message 直接展示给用户"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputState(AssistantError):
    """已有待打出的摸牌时又输入新牌"""


class TileNotFound(AssistantError):
    """要打出或移除的牌不存在"""


class TileOverflow(AssistantError):
    """严格模式下同种牌超过 4 张"""


class InvalidSeat(AssistantError):
    """座位编号越界"""


class InvalidTile(AssistantError):
    """无法识别的牌面写法"""
