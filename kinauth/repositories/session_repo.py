from datetime import datetime
from typing import Optional
from asyncpg import Connection


class SessionRepository:

    def __init__(self, conn: Connection):
        self.conn = conn

    async def create(self, user_id: str, refresh_jti: str, expires_at: datetime) -> dict:
        sql = """
            INSERT INTO sessions (user_id, refresh_jti, expires_at)
            VALUES ($1, $2, $3)
            RETURNING *;
        """
        record = await self.conn.fetchrow(sql, user_id, refresh_jti, expires_at)
        return dict(record)

    async def get_by_jti(self, refresh_jti: str) -> Optional[dict]:
        sql = "SELECT * FROM sessions WHERE refresh_jti = $1;"
        record = await self.conn.fetchrow(sql, refresh_jti)
        return dict(record) if record else None

    async def delete_by_jti(self, refresh_jti: str) -> int:
        status = await self.conn.execute("DELETE FROM sessions WHERE refresh_jti = $1;", refresh_jti)
        # asyncpg reports "DELETE <count>"
        return int(status.split()[-1]) if status else 0
