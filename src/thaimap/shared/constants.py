"""
ThaiMap 공유 상수 정의

지도 기본 설정, 국가 경계, 색상 팔레트, 레벨별 외곽선/라벨 테이블 등
프로젝트 전역에서 사용되는 불변 값들을 중앙 관리합니다.
"""

# ─── 지도 기본 설정 (Map Configuration) ─────────────────────
THAILAND_CENTER = (13.7563, 100.5018)   # 방콕 (lat, lng)
DEFAULT_ZOOM = 6
MIN_ZOOM = 5
MAX_ZOOM = 15

# ─── 태국 영토 경계 ─────────────────────────────────────────
THAILAND_BOUNDS = {
    "north": 20.4634,
    "south": 5.6126,
    "east": 105.6369,
    "west": 97.3758,
}

# 좌표 유효성 검증용 (대략적인 범위)
THAILAND_LAT_RANGE = (5.61, 20.46)
THAILAND_LNG_RANGE = (97.38, 105.64)

# ─── 웹 메르카토르 타일 ──────────────────────────────────────
WORLD_TILE_PX = 256
ZOOM_CAP = 18

# ─── 색상 (Colors) ───────────────────────────────────────────
REGION_PALETTE = (
    "#e74c3c", "#3498db", "#2ecc71", "#f39c12", "#9b59b6",
    "#e67e22", "#1abc9c", "#34495e", "#f1c40f", "#95a5a6",
)
BASE_FILL_COLOR = "#3498db"
BASE_STROKE_COLOR = "#2c3e50"
AREA_GRADIENT_DEFAULT = "#3498db"   # min == max 일 때
AREA_HUE_START = 240                # 파랑
AREA_HUE_SPAN = 120

HIGHLIGHT_COLOR = "#e74c3c"
SELECTED_COLOR = "#f39c12"

# ─── 검색 ────────────────────────────────────────────────────
SEARCH_DEFAULT_LIMIT = 20
SEARCH_MAX_LIMIT = 100

UNKNOWN_REGION = "Unknown Region"
UNKNOWN_FEATURE_ID = "unknown"
