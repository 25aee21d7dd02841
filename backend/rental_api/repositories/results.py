from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class WriteResult:
    affected_rows: int
    insert_id: Optional[int] = None
