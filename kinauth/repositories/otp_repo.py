from datetime import datetime
from typing import Optional
from asyncpg import Connection


class OtpRepository:
    """Persistence for OTP challenges. Rows are consumed, never deleted."""

    def __init__(self, conn: Connection):
        self.conn = conn

    async def create(self, target: str, code: str, purpose: str, expires_at: datetime) -> dict:
        sql = """
            INSERT INTO otp_challenges (target, code, purpose, expires_at)
            VALUES ($1, $2, $3, $4)
            RETURNING *;
        """
        record = await self.conn.fetchrow(sql, target, code, purpose, expires_at)
        return dict(record)

    async def find_latest_active(self, target: str, code: str, now: datetime) -> Optional[dict]:
        sql = """
            SELECT * FROM otp_challenges
            WHERE target = $1
              AND code = $2
              AND consumed_at IS NULL
              AND expires_at > $3
            ORDER BY created_at DESC
            LIMIT 1;
        """
        record = await self.conn.fetchrow(sql, target, code, now)
        return dict(record) if record else None

    async def consume(self, otp_id, now: datetime) -> bool:
        # Only one concurrent caller can flip consumed_at from NULL.
        sql = """
            UPDATE otp_challenges SET consumed_at = $2
            WHERE id = $1 AND consumed_at IS NULL
            RETURNING id;
        """
        consumed_id = await self.conn.fetchval(sql, otp_id, now)
        return consumed_id is not None
