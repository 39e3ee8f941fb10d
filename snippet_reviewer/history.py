"""评审历史持久化"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .models.review_result import REVIEW_SCHEMA_VERSION, CodeReview

logger = logging.getLogger(__name__)


class HistoryEntry(BaseModel):
    """一条评审历史"""

    model_config = ConfigDict(frozen=True)

    created_at: datetime = Field(default_factory=datetime.now, description="评审时间")
    language: str = Field(description="评审使用的语言")
    code: str = Field(description="原始代码")
    original_file_name: Optional[str] = Field(None, description="原始文件名")
    review: CodeReview = Field(description="评审结果")
    schema_version: str = Field(default=REVIEW_SCHEMA_VERSION, description="评审结果 schema 版本")


_entries_adapter = TypeAdapter(list[HistoryEntry])


class HistoryStore:
    """以 JSON 文件保存评审历史，最新的在前"""

    def __init__(self, path: Path, max_entries: int = 50):
        self.path = Path(path)
        self.max_entries = max_entries

    def load(self) -> list[HistoryEntry]:
        """读取历史，文件损坏或版本不符时丢弃"""
        if not self.path.exists():
            return []

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("评审历史无法解析，已丢弃: %s (%s)", self.path, e)
            return []

        if not isinstance(data, list):
            logger.warning("评审历史格式错误，已丢弃: %s", self.path)
            return []

        # 逐条校验，旧版本或损坏的记录单独跳过
        entries = []
        for item in data:
            if not isinstance(item, dict) or item.get("schema_version") != REVIEW_SCHEMA_VERSION:
                continue
            try:
                entries.append(HistoryEntry.model_validate(item))
            except ValidationError as e:
                logger.warning("跳过无法解析的历史记录: %s", e)
        return entries

    def add(self, entry: HistoryEntry) -> list[HistoryEntry]:
        """添加一条记录并写回文件"""
        entries = [entry] + self.load()
        entries = entries[: self.max_entries]
        self._write(entries)
        return entries

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()

    def _write(self, entries: list[HistoryEntry]) -> None:
        payload = _entries_adapter.dump_json(entries, indent=2, by_alias=True)
        self.path.write_bytes(payload)
