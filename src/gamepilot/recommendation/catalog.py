"""
후보 게임 카탈로그

- CandidateGame: 스코어러가 읽는 후보 게임 값 (id, 이름, 장르, 무드 태그, 플레이스타일 태그,
  난이도, 세션 적합도, 인기도)
- normalize_library_game: 라이브러리/외부 레코드(느슨한 dict)를 CandidateGame으로 정규화
- DEFAULT_GAME_POOL: 라이브러리가 비었을 때 쓰는 내장 카탈로그

필드가 없거나 형식이 맞지 않으면 예외 대신 빈 값으로 둔다. 해당 팩터는 0점이 된다.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final, Iterable, Mapping

from gamepilot.persona.types import DIFFICULTY_LEVELS

SESSION_SUITABILITIES: Final[tuple[str, ...]] = ("short", "medium", "long", "flexible")


@dataclass(frozen=True)
class CandidateGame:
    id: str
    name: str
    genres: tuple[str, ...] = ()
    mood_tags: tuple[str, ...] = ()
    playstyle_tags: tuple[str, ...] = ()
    difficulty: str | None = None
    session_suitability: str | None = None
    popularity: float | None = None
    narrative_style: str | None = None
    cover_image: str | None = None
    store_url: str | None = None
    price: str | None = None


def _safe_float(x: Any, default: float | None = None) -> float | None:
    if x is None:
        return default
    try:
        return float(x)
    except (ValueError, TypeError):
        return default


def _names(values: Any) -> tuple[str, ...]:
    """
    ["RPG", {"name": "Action"}, ...] 처럼 문자열/객체가 섞인 목록에서 이름만 뽑는다.
    """
    if values is None:
        return ()
    if isinstance(values, str):
        return (values.strip(),) if values.strip() else ()
    out: list[str] = []
    try:
        items = list(values)
    except TypeError:
        return ()
    for v in items:
        if isinstance(v, Mapping):
            v = v.get("name")
        if isinstance(v, str) and v.strip():
            out.append(v.strip())
    return tuple(out)


def _first(record: Mapping[str, Any], *keys: str) -> Any:
    for k in keys:
        if record.get(k) is not None:
            return record[k]
    return None


def normalize_library_game(record: Mapping[str, Any]) -> CandidateGame:
    """
    라이브러리에 있는 게임은 난이도/세션 정보가 없는 경우가 많다.
    없거나 모르는 값은 None으로 둔다(해당 팩터 0점).
    """
    app_id = _first(record, "app_id", "appId", "appid")
    store_url = _first(record, "store_url", "steam_url", "steamUrl")
    if store_url is None and app_id is not None:
        store_url = f"https://store.steampowered.com/app/{app_id}"

    session = _first(record, "session_suitability", "sessionSuitability")
    if session not in SESSION_SUITABILITIES:
        session = None
    difficulty = _first(record, "difficulty")
    if difficulty not in DIFFICULTY_LEVELS:
        difficulty = None

    return CandidateGame(
        id=str(_first(record, "id", "app_id", "appId", "appid") or ""),
        name=str(_first(record, "name", "title") or ""),
        genres=_names(record.get("genres")),
        mood_tags=_names(_first(record, "mood_tags", "moodTags", "moods")),
        playstyle_tags=_names(_first(record, "playstyle_tags", "playstyleTags", "tags")),
        difficulty=difficulty,
        session_suitability=session,
        popularity=_safe_float(record.get("popularity")),
        narrative_style=_first(record, "narrative_style", "narrativeStyle"),
        cover_image=_first(record, "cover_image", "coverImage"),
        store_url=store_url,
        price=_first(record, "price") or "Owned",
    )


def coerce_candidates(games: Iterable[Any] | None) -> list[CandidateGame]:
    out: list[CandidateGame] = []
    for g in games or ():
        if isinstance(g, CandidateGame):
            out.append(g)
        elif isinstance(g, Mapping):
            out.append(normalize_library_game(g))
        else:
            raise TypeError(f"candidate game must be a CandidateGame or mapping, got {type(g).__name__}")
    return out


def _steam(app_id: int) -> tuple[str, str]:
    return (
        f"https://cdn.akamai.steamstatic.com/steam/apps/{app_id}/library_600x900.jpg",
        f"https://store.steampowered.com/app/{app_id}",
    )


# popularity는 목록 순서대로 내림차순 (인기 fallback의 상위 3개가 bg3/cyberpunk/stardew)
DEFAULT_GAME_POOL: Final[tuple[CandidateGame, ...]] = (
    CandidateGame(
        id="bg3",
        name="Baldur's Gate 3",
        genres=("RPG", "Adventure", "Strategy"),
        mood_tags=("immersive", "strategic", "social", "creative"),
        playstyle_tags=("story-driven", "strategic", "social"),
        difficulty="Normal",
        session_suitability="long",
        popularity=98,
        narrative_style="deep",
        cover_image=_steam(1086940)[0],
        store_url=_steam(1086940)[1],
        price="$59.99",
    ),
    CandidateGame(
        id="cyberpunk",
        name="Cyberpunk 2077",
        genres=("RPG", "Action", "Open World"),
        mood_tags=("energetic", "immersive", "competitive", "creative"),
        playstyle_tags=("explorer", "competitive", "story-driven"),
        difficulty="Normal",
        session_suitability="medium",
        popularity=95,
        narrative_style="deep",
        cover_image=_steam(1091500)[0],
        store_url=_steam(1091500)[1],
        price="$29.99",
    ),
    CandidateGame(
        id="stardew",
        name="Stardew Valley",
        genres=("Simulation", "RPG", "Farming"),
        mood_tags=("chill", "creative", "social", "relaxed"),
        playstyle_tags=("casual", "creative", "social"),
        difficulty="Relaxed",
        session_suitability="short",
        popularity=93,
        narrative_style="light",
        cover_image=_steam(413150)[0],
        store_url=_steam(413150)[1],
        price="$14.99",
    ),
    CandidateGame(
        id="hades",
        name="Hades",
        genres=("Roguelike", "Action", "Indie"),
        mood_tags=("energetic", "competitive", "focused", "challenging"),
        playstyle_tags=("competitive", "achiever", "focused"),
        difficulty="Hard",
        session_suitability="short",
        popularity=90,
        narrative_style="moderate",
        cover_image=_steam(1145360)[0],
        store_url=_steam(1145360)[1],
        price="$24.99",
    ),
    CandidateGame(
        id="disco",
        name="Disco Elysium",
        genres=("RPG", "Indie", "Turn-Based"),
        mood_tags=("creative", "immersive", "thoughtful", "relaxed"),
        playstyle_tags=("story-driven", "explorer", "creative"),
        difficulty="Normal",
        session_suitability="medium",
        popularity=85,
        narrative_style="deep",
        cover_image=_steam(646920)[0],
        store_url=_steam(646920)[1],
        price="$19.99",
    ),
    CandidateGame(
        id="vampire",
        name="Vampire Survivors",
        genres=("Action", "Roguelike", "Survival"),
        mood_tags=("energetic", "competitive", "focused", "addictive"),
        playstyle_tags=("competitive", "achiever", "focused"),
        difficulty="Normal",
        session_suitability="short",
        popularity=84,
        narrative_style="minimal",
        cover_image=_steam(1794680)[0],
        store_url=_steam(1794680)[1],
        price="$4.99",
    ),
    CandidateGame(
        id="elden",
        name="Elden Ring",
        genres=("RPG", "Action", "Open World"),
        mood_tags=("challenging", "immersive", "focused", "competitive"),
        playstyle_tags=("explorer", "achiever", "competitive"),
        difficulty="Brutal",
        session_suitability="long",
        popularity=82,
        narrative_style="moderate",
        cover_image=_steam(1245620)[0],
        store_url=_steam(1245620)[1],
        price="$59.99",
    ),
    CandidateGame(
        id="hollow",
        name="Hollow Knight",
        genres=("Metroidvania", "Action", "Indie"),
        mood_tags=("challenging", "focused", "immersive", "exploratory"),
        playstyle_tags=("explorer", "achiever", "focused"),
        difficulty="Hard",
        session_suitability="medium",
        popularity=80,
        narrative_style="light",
        cover_image=_steam(367520)[0],
        store_url=_steam(367520)[1],
        price="$14.99",
    ),
    CandidateGame(
        id="slay",
        name="Slay the Spire",
        genres=("Roguelike", "Strategy", "Card Game"),
        mood_tags=("strategic", "thoughtful", "competitive", "challenging"),
        playstyle_tags=("strategic", "competitive", "focused"),
        difficulty="Hard",
        session_suitability="short",
        popularity=78,
        narrative_style="minimal",
        cover_image=_steam(646570)[0],
        store_url=_steam(646570)[1],
        price="$16.99",
    ),
    CandidateGame(
        id="minecraft",
        name="Minecraft",
        genres=("Sandbox", "Survival", "Creative"),
        mood_tags=("creative", "relaxed", "social", "exploratory"),
        playstyle_tags=("creative", "explorer", "social", "casual"),
        difficulty="Relaxed",
        session_suitability="flexible",
        popularity=75,
        narrative_style="minimal",
        cover_image=_steam(239140)[0],
        store_url="https://www.minecraft.net",
        price="$29.99",
    ),
)
