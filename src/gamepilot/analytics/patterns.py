"""
(6) 무드 패턴 분석 (ML 없이 단순 집계)

- get_temporal_mood_patterns: 시간대별 평균 강도 → best/worst hours, 요일별 평균
- get_compound_mood_suggestions: (주 무드, 보조 태그) 동시 등장 빈도 Top 5
- get_session_mood_delta: 세션 전후 무드 변화 요약

빈 입력이면 빈 값/0을 돌려준다(예외 없음). 동률은 먼저 등장한 순서를 유지한다.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Final, Sequence

import pandas as pd

from gamepilot.analytics.events import MoodEvent, SessionEvent

logger = logging.getLogger(__name__)

TOP_HOURS: Final[int] = 3
TOP_COMPOUND_MOODS: Final[int] = 5


@dataclass(frozen=True)
class TemporalMoodPatterns:
    best_hours: tuple[int, ...] = ()
    worst_hours: tuple[int, ...] = ()
    day_trends: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class CompoundMood:
    primary: str
    secondary: str
    frequency: float
    average_intensity: float


@dataclass(frozen=True)
class SessionMoodDelta:
    average_mood_delta: float = 0.0
    positive_session_ratio: float = 0.0
    session_duration_impact: float = 0.0


def _events_frame(events: Sequence[MoodEvent]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "hour": [e.temporal_context.hour_of_day for e in events],
            "day": [e.temporal_context.day_name for e in events],
            "intensity": [float(e.intensity) for e in events],
        }
    )


def get_temporal_mood_patterns(events: Sequence[MoodEvent]) -> TemporalMoodPatterns:
    """
    goodness = 시간대(0~23)별 평균 intensity.
    best_hours는 높은 순 Top 3, worst_hours는 낮은 순 Top 3 (가장 나쁜 시간이 앞).
    """
    if not events:
        return TemporalMoodPatterns()

    df = _events_frame(events)

    # sort=False: 처음 등장한 순서를 유지해야 안정 정렬의 동률 처리가 결정적이다
    hourly = df.groupby("hour", sort=False)["intensity"].mean()
    best = hourly.sort_values(ascending=False, kind="mergesort").head(TOP_HOURS)
    worst = hourly.sort_values(ascending=True, kind="mergesort").head(TOP_HOURS)

    daily = df.groupby("day", sort=False)["intensity"].mean()
    day_trends = {str(day): float(avg) for day, avg in daily.items()}

    return TemporalMoodPatterns(
        best_hours=tuple(int(h) for h in best.index),
        worst_hours=tuple(int(h) for h in worst.index),
        day_trends=day_trends,
    )


def get_compound_mood_suggestions(events: Sequence[MoodEvent]) -> list[CompoundMood]:
    """
    이벤트의 mood_tags 각각을 (mood_id, tag) 쌍으로 센다. 주 무드와 같은 태그는 제외.
    frequency = 쌍 등장 횟수 / 전체 이벤트 수
    """
    if not events:
        return []

    rows = [
        {"primary": e.mood_id, "secondary": tag, "intensity": float(e.intensity)}
        for e in events
        for tag in e.mood_tags
        if tag and tag != e.mood_id
    ]
    if not rows:
        return []

    grouped = (
        pd.DataFrame(rows)
        .groupby(["primary", "secondary"], sort=False)["intensity"]
        .agg(["size", "mean"])
        .sort_values("size", ascending=False, kind="mergesort")
        .head(TOP_COMPOUND_MOODS)
    )

    total = len(events)
    return [
        CompoundMood(
            primary=str(primary),
            secondary=str(secondary),
            frequency=float(row["size"]) / total,
            average_intensity=float(row["mean"]),
        )
        for (primary, secondary), row in grouped.iterrows()
    ]


def _session_delta(session: SessionEvent) -> int:
    if session.mood_delta is not None:
        return session.mood_delta
    return session.post_mood.intensity - session.pre_mood.intensity


def get_session_mood_delta(sessions: Sequence[SessionEvent]) -> SessionMoodDelta:
    """
    pre/post 무드가 모두 있는 세션만 대상.
    session_duration_impact = 세션 길이와 무드 변화의 피어슨 상관계수
    (표본이 2개 미만이거나 분산이 0이면 0.0).
    """
    qualifying = [s for s in sessions if s.pre_mood is not None and s.post_mood is not None]
    if not qualifying:
        return SessionMoodDelta()

    df = pd.DataFrame(
        {
            "delta": [float(_session_delta(s)) for s in qualifying],
            "duration": [
                float(s.session_duration) if s.session_duration is not None else math.nan
                for s in qualifying
            ],
        }
    )

    impact = df["duration"].corr(df["delta"])
    if pd.isna(impact):
        impact = 0.0

    result = SessionMoodDelta(
        average_mood_delta=float(df["delta"].mean()),
        positive_session_ratio=float((df["delta"] > 0).mean()),
        session_duration_impact=float(impact),
    )
    logger.debug("session mood delta over %d sessions: %s", len(qualifying), result)
    return result
