from __future__ import annotations

import json
from typing import Optional

from mysql.connector.errors import IntegrityError

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, is_duplicate_key
from .model import AuthIdentity, SignupMetadata
from .repository import IdentityRepository


def _row_to_identity(r: dict) -> AuthIdentity:
    raw = r.get("signup_metadata")
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    metadata = SignupMetadata.from_dict(json.loads(raw)) if raw else None
    return AuthIdentity(
        id=int(r["id"]),
        email=r["email"],
        password_hash=r["password_hash"],
        metadata=metadata,
        created_at=r.get("created_at"),
    )


class MySQLIdentityRepository(IdentityRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, identity_id: int) -> Optional[AuthIdentity]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, email, password_hash, signup_metadata, created_at FROM auth_identities WHERE id=%s",
                (int(identity_id),),
            )
            r = fetchone(cur)
            return _row_to_identity(r) if r else None

    def get_by_email(self, email: str) -> Optional[AuthIdentity]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, email, password_hash, signup_metadata, created_at FROM auth_identities WHERE email=%s",
                (email,),
            )
            r = fetchone(cur)
            return _row_to_identity(r) if r else None

    def create_identity(self, *, email: str, password_hash: str, metadata: SignupMetadata) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO auth_identities(email, password_hash, signup_metadata) VALUES(%s,%s,%s)",
                    (email, password_hash, json.dumps(metadata.to_dict())),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            if is_duplicate_key(e):
                raise ConflictError("An account with this email already exists") from e
            raise

    def restart_identity(self, identity_id: int, *, password_hash: str, metadata: SignupMetadata) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE auth_identities SET password_hash=%s, signup_metadata=%s WHERE id=%s",
                (password_hash, json.dumps(metadata.to_dict()), int(identity_id)),
            )

    def delete_identity(self, identity_id: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM auth_identities WHERE id=%s", (int(identity_id),))
