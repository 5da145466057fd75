import logging
from collections import deque
from typing import Optional

import config
from models import GameState

logger = logging.getLogger(__name__)


class HistoryManager:
    """
    撤销栈：每次修改状态之前压入完整的状态快照，最多保留 HISTORY_LIMIT 步
    快照先压栈，操作成功后 commit() 才裁剪到上限，失败时可原样撤回
    """

    def __init__(self, limit: int = config.HISTORY_LIMIT):
        self.limit = limit
        self._stack = deque()
        self._next_token = 0

    def __len__(self):
        return len(self._stack)

    @property
    def can_undo(self) -> bool:
        return len(self._stack) > 0

    def snapshot(self, state: GameState) -> int:
        """深拷贝当前状态并压栈，返回本次快照的令牌 (用于失败时撤回)"""
        token = self._next_token
        self._next_token += 1
        self._stack.append((token, state.copy()))
        return token

    def commit(self):
        """操作成功后裁剪到上限，丢弃最旧的步骤"""
        while len(self._stack) > self.limit:
            evicted, _ = self._stack.popleft()
            logger.debug("history full, evicted snapshot #%d", evicted)

    def mark(self) -> int:
        """下一次快照将使用的令牌，配合 rollback() 撤回一批快照"""
        return self._next_token

    def discard(self, token: int) -> bool:
        """撤回指定令牌的快照 (操作失败、状态未变时使用)"""
        for entry in reversed(self._stack):
            if entry[0] == token:
                self._stack.remove(entry)
                return True
        return False

    def rollback(self, mark: int) -> int:
        """撤回 mark 之后压入的全部快照，返回撤回的数量"""
        removed = 0
        while self._stack and self._stack[-1][0] >= mark:
            self._stack.pop()
            removed += 1
        return removed

    def pop(self) -> Optional[GameState]:
        """弹出最近一次快照；栈为空时返回 None"""
        if not self._stack:
            return None
        _, state = self._stack.pop()
        return state

    def clear(self):
        self._stack.clear()
