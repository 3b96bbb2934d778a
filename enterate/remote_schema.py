"""
Remote schema bootstrap for the Supabase Postgres database
Run once against DATABASE_URL before pointing the app at a new project
"""

from typing import Dict, List, Optional
import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from .database import Settings

logger = logging.getLogger(__name__)


def schema_statements(settings: Settings) -> List[str]:
    """DDL for every remote table, honouring the configured table names"""
    events = settings.events_table
    comments = settings.comments_table
    interactions = settings.interactions_table
    users = settings.users_table
    points = settings.points_table

    return [
        f"""
        CREATE TABLE IF NOT EXISTS {users} (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            name TEXT NOT NULL,
            email TEXT NOT NULL UNIQUE,
            profile_image TEXT,
            role TEXT NOT NULL DEFAULT 'user'
                CHECK (role IN ('user', 'moderator', 'admin')),
            admin_status TEXT
                CHECK (admin_status IN ('pending', 'approved', 'rejected')),
            created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
        """,
        f"""
        CREATE TABLE IF NOT EXISTS {events} (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            title TEXT NOT NULL,
            description TEXT NOT NULL DEFAULT '',
            date TEXT NOT NULL,
            time TEXT NOT NULL,
            end_time TEXT,
            location TEXT NOT NULL DEFAULT '',
            category TEXT NOT NULL DEFAULT '',
            image_url TEXT,
            price NUMERIC NOT NULL DEFAULT 0 CHECK (price >= 0),
            points INTEGER NOT NULL DEFAULT 0 CHECK (points >= 0),
            organizer_name TEXT NOT NULL DEFAULT '',
            created_by TEXT NOT NULL DEFAULT '',
            likes INTEGER NOT NULL DEFAULT 0 CHECK (likes >= 0),
            liked_by TEXT[] NOT NULL DEFAULT '{{}}',
            attendees TEXT[] NOT NULL DEFAULT '{{}}',
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ
        )
        """,
        f"""
        CREATE TABLE IF NOT EXISTS {comments} (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            event_id UUID NOT NULL REFERENCES {events}(id) ON DELETE CASCADE,
            user_id TEXT NOT NULL,
            user_name TEXT NOT NULL DEFAULT '',
            user_profile_image TEXT,
            content TEXT NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
        """,
        f"""
        CREATE TABLE IF NOT EXISTS {interactions} (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            event_id UUID NOT NULL REFERENCES {events}(id) ON DELETE CASCADE,
            user_id TEXT NOT NULL,
            interaction_type TEXT NOT NULL
                CHECK (interaction_type IN ('like', 'attend')),
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            UNIQUE (event_id, user_id, interaction_type)
        )
        """,
        f"""
        CREATE TABLE IF NOT EXISTS {points} (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id TEXT NOT NULL,
            event_id UUID NOT NULL REFERENCES {events}(id) ON DELETE CASCADE,
            points_earned INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            UNIQUE (user_id, event_id)
        )
        """,
        f"CREATE INDEX IF NOT EXISTS ix_{comments}_event_id ON {comments} (event_id)",
        f"CREATE INDEX IF NOT EXISTS ix_{interactions}_event_id ON {interactions} (event_id)",
        f"CREATE INDEX IF NOT EXISTS ix_{points}_user_id ON {points} (user_id)",
    ]


def required_columns(settings: Settings) -> Dict[str, List[str]]:
    return {
        settings.events_table: ["id", "title", "likes", "liked_by", "attendees", "created_at"],
        settings.comments_table: ["id", "event_id", "user_id", "content", "created_at"],
        settings.interactions_table: ["event_id", "user_id", "interaction_type"],
        settings.users_table: ["id", "email", "name", "role"],
        settings.points_table: ["user_id", "event_id", "points_earned"],
    }


def apply_remote_schema(engine: Engine, settings: Settings):
    """Create the remote tables; safe to re-run"""
    with engine.connect() as conn:
        trans = conn.begin()
        try:
            for statement in schema_statements(settings):
                conn.execute(text(statement))
            trans.commit()
            logger.info("✅ Remote schema applied")
        except Exception as e:
            trans.rollback()
            logger.error(f"❌ Schema bootstrap failed: {e}")
            raise


def verify_remote_schema(engine: Engine, settings: Settings) -> bool:
    """Check that every table exposes the columns the app reads"""
    try:
        with engine.connect() as conn:
            missing: Dict[str, List[str]] = {}
            for table, columns in required_columns(settings).items():
                result = conn.execute(
                    text(
                        """
                    SELECT column_name
                    FROM information_schema.columns
                    WHERE table_name = :table
                """
                    ),
                    {"table": table},
                )
                present = {row[0] for row in result.fetchall()}
                absent = [col for col in columns if col not in present]
                if absent:
                    missing[table] = absent

            if missing:
                logger.error(f"❌ Missing required columns: {missing}")
                return False

            logger.info("✅ Remote schema verification completed")
            return True

    except Exception as e:
        logger.error(f"❌ Verification failed: {e}")
        return False


def main(settings: Optional[Settings] = None):
    """Apply and verify the schema on DATABASE_URL"""
    settings = settings or Settings.from_env()
    if not settings.database_url:
        raise SystemExit("DATABASE_URL is not set")

    logger.info("🚀 Bootstrapping Supabase schema...")
    engine = create_engine(settings.database_url, pool_pre_ping=True)

    apply_remote_schema(engine, settings)
    if not verify_remote_schema(engine, settings):
        raise SystemExit("Schema verification failed")

    logger.info("🎉 Schema ready")
    logger.info("Next steps:")
    logger.info("1. Set SUPABASE_URL and SUPABASE_ANON_KEY")
    logger.info("2. Start the API; local events are copied up on first connect")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
