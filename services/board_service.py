"""
Board Service Module

Board configuration registry backed by settings.BOARDS.
"""

from typing import Any, Dict, Optional

from config import settings
from data.models import BoardConfig
from utils.exceptions import NotFoundError


class SettingsBoardRegistry:
    """BoardRegistry reading the board map from configuration."""

    def __init__(self, boards: Optional[Dict[str, Dict[str, Any]]] = None):
        self.boards = boards if boards is not None else settings.BOARDS

    def has_board(self, board_id: str) -> bool:
        return board_id in self.boards

    def get_board_cfg(self, board_id: str) -> BoardConfig:
        if board_id not in self.boards:
            raise NotFoundError(f"board with id /{board_id}/ cannot be found")

        return BoardConfig.from_dict(board_id, self.boards[board_id])
