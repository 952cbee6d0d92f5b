from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Subject


class SubjectRepository(Protocol):
    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        raise NotImplementedError

    def list_by_department(self, dept_id: int) -> Sequence[Subject]:
        raise NotImplementedError
