from typing import List
from asyncpg import Connection, UniqueViolationError

from kinauth.core.exceptions import ConflictError


class FamilyRepository:
    """Families, memberships and locations. Written only during onboarding."""

    def __init__(self, conn: Connection):
        self.conn = conn

    # ------------------ Creation ------------------ #

    async def create_family(self, name: str, owner_id: str) -> dict:
        sql = "INSERT INTO families (name, owner_id) VALUES ($1, $2) RETURNING *;"
        try:
            record = await self.conn.fetchrow(sql, name, owner_id)
        except UniqueViolationError as e:
            raise ConflictError(getattr(e, "constraint_name", None))
        return dict(record)

    async def create_membership(self, user_id: str, family_id, role: str) -> dict:
        sql = """
            INSERT INTO family_members (user_id, family_id, role)
            VALUES ($1, $2, $3)
            RETURNING *;
        """
        record = await self.conn.fetchrow(sql, user_id, family_id, role)
        return dict(record)

    async def create_locations(self, family_id, locations: List[dict]) -> List[dict]:
        if not locations:
            return []
        sql = """
            INSERT INTO locations (family_id, label, address, lat, lng)
            SELECT $1, l.label, l.address, l.lat, l.lng
            FROM unnest($2::text[], $3::text[], $4::float8[], $5::float8[])
                AS l(label, address, lat, lng)
            RETURNING *;
        """
        records = await self.conn.fetch(
            sql,
            family_id,
            [loc["label"] for loc in locations],
            [loc.get("address") for loc in locations],
            [loc.get("lat") for loc in locations],
            [loc.get("lng") for loc in locations],
        )
        return [dict(r) for r in records]

    # ------------------ Retrieval Methods ------------------ #

    async def list_memberships(self, user_id: str) -> List[dict]:
        sql = """
            SELECT
                m.*,
                f.name AS family_name,
                f.owner_id AS family_owner_id,
                f.created_at AS family_created_at
            FROM family_members m
            JOIN families f ON f.id = m.family_id
            WHERE m.user_id = $1
            ORDER BY m.created_at ASC;
        """
        records = await self.conn.fetch(sql, user_id)
        return [dict(r) for r in records]

    async def list_owned(self, user_id: str) -> List[dict]:
        sql = "SELECT * FROM families WHERE owner_id = $1 ORDER BY created_at ASC;"
        records = await self.conn.fetch(sql, user_id)
        return [dict(r) for r in records]

    async def list_locations(self, family_ids: list) -> List[dict]:
        if not family_ids:
            return []
        sql = "SELECT * FROM locations WHERE family_id = ANY($1::uuid[]) ORDER BY created_at ASC;"
        records = await self.conn.fetch(sql, family_ids)
        return [dict(r) for r in records]
