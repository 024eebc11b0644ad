"""Seed database with demo tracks."""

from soundchain.db.models import Track
from soundchain.db.session import get_session, init_db

SEED_TRACKS = [
    ("lofi-001", "Saigon Rain", "Minh Tran", 50.0,
     ["YOUTUBE", "COMMERCIAL", "STREAMING", "PODCAST"], True, "worldwide"),
    ("trap-002", "Neon District", "Kai Beats", 80.0,
     ["YOUTUBE", "TIKTOK", "COMMERCIAL", "STREAMING"], True, "worldwide"),
    ("ambient-003", "Ha Long Mist", "Linh Nguyen", 30.0,
     ["PODCAST", "STREAMING", "YOUTUBE"], False, "worldwide"),
    ("cinematic-004", "Last Light", "Aurora Sound", 200.0,
     ["FILM", "BROADCAST", "STREAMING", "COMMERCIAL"], True, "worldwide"),
    ("vpop-005", "Mùa Hè", "DJ Phong", 40.0,
     ["TIKTOK", "YOUTUBE", "STREAMING"], True, "national"),
]


def seed() -> int:
    """Insert seed tracks, return count inserted."""
    init_db()
    session = get_session()
    try:
        existing = session.query(Track).count()
        if existing > 0:
            return 0

        for track_id, title, artist, price, rights, exclusive, territory in SEED_TRACKS:
            session.add(
                Track(
                    track_id=track_id,
                    title=title,
                    artist=artist,
                    min_price=price,
                    allowed_usage_rights=rights,
                    exclusivity_available=exclusive,
                    territory=territory,
                )
            )

        session.commit()
        return len(SEED_TRACKS)
    finally:
        session.close()
