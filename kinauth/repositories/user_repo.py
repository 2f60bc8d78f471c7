from typing import Optional
from asyncpg import Connection, UniqueViolationError

from kinauth.core.exceptions import ConflictError

# Columns a profile update may touch.
PROFILE_COLUMNS = ("name", "gender", "birth_date", "avatar_url", "email", "phone")


class UserRepository:

    def __init__(self, conn: Connection):
        self.conn = conn

    async def get_by_id(self, user_id: str) -> Optional[dict]:
        sql = "SELECT * FROM users WHERE id = $1;"
        record = await self.conn.fetchrow(sql, user_id)
        return dict(record) if record else None

    async def get_by_email(self, email: str) -> Optional[dict]:
        sql = "SELECT * FROM users WHERE email = $1;"
        record = await self.conn.fetchrow(sql, email)
        return dict(record) if record else None

    async def get_by_contact(self, target: str) -> Optional[dict]:
        sql = "SELECT * FROM users WHERE email = $1 OR phone = $1 LIMIT 1;"
        record = await self.conn.fetchrow(sql, target)
        return dict(record) if record else None

    async def find_existing(self, email: Optional[str], phone: Optional[str]) -> Optional[dict]:
        sql = "SELECT * FROM users WHERE email = $1 OR phone = $2 LIMIT 1;"
        record = await self.conn.fetchrow(sql, email, phone)
        return dict(record) if record else None

    async def create(self, user_in: dict) -> dict:
        sql = """
            INSERT INTO users (email, phone, password_hash, name, country_code)
            VALUES ($1, $2, $3, $4, $5)
            RETURNING *;
        """
        try:
            record = await self.conn.fetchrow(
                sql,
                user_in.get("email"),
                user_in.get("phone"),
                user_in.get("password_hash"),
                user_in.get("name"),
                user_in.get("country_code"),
            )
        except UniqueViolationError as e:
            raise ConflictError(getattr(e, "constraint_name", None))
        return dict(record)

    async def update_fields(self, user_id: str, fields: dict) -> Optional[dict]:
        unknown = set(fields) - set(PROFILE_COLUMNS)
        if unknown:
            raise ValueError(f"Cannot update columns: {sorted(unknown)}")
        if not fields:
            return await self.get_by_id(user_id)

        assignments = []
        args = []
        for column, value in fields.items():
            args.append(value)
            assignments.append(f"{column} = ${len(args)}")
        args.append(user_id)

        sql = f"UPDATE users SET {', '.join(assignments)} WHERE id = ${len(args)} RETURNING *;"
        try:
            record = await self.conn.fetchrow(sql, *args)
        except UniqueViolationError as e:
            raise ConflictError(getattr(e, "constraint_name", None))
        return dict(record) if record else None
