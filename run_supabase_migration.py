#!/usr/bin/env python3
"""Check that the shared rate-limit counter exists in Supabase."""
import sys
sys.path.insert(0, '.')

from app.core.rate_limiter import INCREMENT_RPC
from app.db.supabase_client import get_supabase

RATE_LIMIT_SQL = f"""
CREATE TABLE IF NOT EXISTS rate_limit_counters (
    rate_key TEXT NOT NULL,
    window_start TIMESTAMPTZ NOT NULL,
    request_count INTEGER NOT NULL DEFAULT 0,
    PRIMARY KEY (rate_key, window_start)
);

CREATE OR REPLACE FUNCTION {INCREMENT_RPC}(p_key TEXT, p_window_seconds INTEGER)
RETURNS INTEGER
LANGUAGE sql
AS $$
    INSERT INTO rate_limit_counters (rate_key, window_start, request_count)
    VALUES (
        p_key,
        to_timestamp(floor(extract(epoch FROM now()) / p_window_seconds) * p_window_seconds),
        1
    )
    ON CONFLICT (rate_key, window_start)
    DO UPDATE SET request_count = rate_limit_counters.request_count + 1
    RETURNING request_count;
$$;

COMMENT ON TABLE rate_limit_counters IS 'Fixed-window request counters shared by all API instances';
"""


def run_migration():
    supabase = get_supabase()

    try:
        print("🚀 Checking migration: rate_limit_counters + increment function")

        print("🔍 Checking if rate_limit_counters table exists...")
        supabase.table('rate_limit_counters').select('rate_key').limit(1).execute()
        print("✅ Table exists!")

    except Exception as e:
        print(f"❌ Migration check failed: {e}")
        print("💡 Run this SQL in your Supabase SQL editor:")
        print(RATE_LIMIT_SQL)
        sys.exit(1)

if __name__ == "__main__":
    run_migration()
