from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# ---------- HELPERS ----------


def now_ms() -> int:
    return int(time.time() * 1000)


def gen_id() -> str:
    # Short id: first 12 chars of uuid4
    return uuid.uuid4().hex[:12]


# ---------- MODELS ----------


@dataclass
class Week:
    id: str
    title: str
    created_at: int

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "createdAt": self.created_at}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Week":
        return cls(id=str(d["id"]), title=d["title"], created_at=int(d["createdAt"]))


@dataclass
class Task:
    id: str
    text: str
    week_id: str
    completed: bool = False
    created_at: int = field(default_factory=now_ms)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "weekId": self.week_id,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Task":
        return cls(
            id=str(d["id"]),
            text=d["text"],
            week_id=str(d["weekId"]),
            completed=bool(d.get("completed", False)),
            created_at=int(d["createdAt"]),
        )


@dataclass
class WeeklySubmission:
    id: str
    week_id: str
    student_name: str
    completed_task_ids: List[str]
    audio_base64: Optional[str]
    timestamp: int
    feedback: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "id": self.id,
            "weekId": self.week_id,
            "studentName": self.student_name,
            "completedTaskIds": list(self.completed_task_ids),
            "audioBase64": self.audio_base64,
            "timestamp": self.timestamp,
        }
        if self.feedback is not None:
            d["feedback"] = self.feedback
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "WeeklySubmission":
        return cls(
            id=str(d["id"]),
            week_id=str(d["weekId"]),
            student_name=d.get("studentName", ""),
            completed_task_ids=[str(x) for x in d.get("completedTaskIds") or []],
            audio_base64=d.get("audioBase64"),
            timestamp=int(d["timestamp"]),
            feedback=d.get("feedback"),
        )


@dataclass
class AppSettings:
    admin_pass: str
    student_pass: str

    def to_dict(self) -> Dict[str, Any]:
        return {"adminPass": self.admin_pass, "studentPass": self.student_pass}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "AppSettings":
        return cls(admin_pass=d["adminPass"], student_pass=d["studentPass"])
