"""
============================================================
TARJETA CRC (Class / Responsibilities / Collaborators)
============================================================
Class: 001_foundation (Alembic Migration)

Responsibilities:
  - Crear el esquema completo del servicio de verificación.
  - Definir los índices únicos que sostienen las invariantes del motor:
      uq_action_logs_participant_action       (a lo sumo un canje por par)
      uq_action_log_revocations_action_log_id (a lo sumo una revocación)
      uq_event_actions_code                   (lookup por código)

Collaborators:
  - PostgreSQL 16+
  - infrastructure/repositories/postgres/* (usan este esquema como contrato)

Policy:
  - Migración BASELINE. Downgrade NO soportado.
  - action_logs es append-only: la revocación es una fila compensatoria.
  - Convención de nombres:
      pk_<tabla>, uq_<tabla>_<col>, ix_<tabla>_<col>, fk_<tabla>_<col>__<ref_tabla>
============================================================
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001_foundation"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _uuid(name: str, nullable: bool = False) -> sa.Column:
    return sa.Column(name, postgresql.UUID(as_uuid=True), nullable=nullable)


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
    )


def upgrade() -> None:
    """
    Crea el esquema fundacional.

    Orden por dependencias:
      1) Identity (users)
      2) Eventos (events, event_days, event_actions)
      3) Participantes
      4) Canjes y revocaciones
    """

    # =========================================================
    # 1) IDENTITY
    # =========================================================
    op.create_table(
        "users",
        _uuid("id"),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column(
            "role",
            sa.String(50),
            nullable=False,
            server_default=sa.text("'staff'"),
        ),
        sa.Column(
            "is_active",
            sa.Boolean,
            nullable=False,
            server_default=sa.text("true"),
        ),
        _created_at(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.CheckConstraint(
            "role IN ('admin', 'organizer', 'staff')", name="ck_users_role"
        ),
    )

    # =========================================================
    # 2) EVENTOS
    # =========================================================
    op.create_table(
        "events",
        _uuid("id"),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column(
            "ticket_price",
            sa.Numeric(10, 2),
            nullable=False,
            server_default=sa.text("0"),
        ),
        sa.Column(
            "is_active",
            sa.Boolean,
            nullable=False,
            server_default=sa.text("true"),
        ),
        sa.Column("starts_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("ends_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id", name="pk_events"),
        sa.UniqueConstraint("slug", name="uq_events_slug"),
        sa.CheckConstraint("ticket_price >= 0", name="ck_events_ticket_price"),
    )

    op.create_table(
        "event_days",
        _uuid("id"),
        _uuid("event_id"),
        sa.Column("day_number", sa.Integer, nullable=False),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("label", sa.String(255), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_event_days"),
        sa.ForeignKeyConstraint(
            ["event_id"],
            ["events.id"],
            name="fk_event_days_event_id__events",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint(
            "event_id", "day_number", name="uq_event_days_event_day_number"
        ),
    )

    op.create_table(
        "event_actions",
        _uuid("id"),
        _uuid("event_id"),
        _uuid("event_day_id"),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("code", sa.String(100), nullable=False),
        sa.Column(
            "is_active",
            sa.Boolean,
            nullable=False,
            server_default=sa.text("true"),
        ),
        _created_at(),
        sa.PrimaryKeyConstraint("id", name="pk_event_actions"),
        sa.ForeignKeyConstraint(
            ["event_id"],
            ["events.id"],
            name="fk_event_actions_event_id__events",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["event_day_id"],
            ["event_days.id"],
            name="fk_event_actions_event_day_id__event_days",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint("code", name="uq_event_actions_code"),
    )
    op.create_index("ix_event_actions_event_id", "event_actions", ["event_id"])

    # =========================================================
    # 3) PARTICIPANTES
    # =========================================================
    op.create_table(
        "participants",
        _uuid("id"),
        _uuid("event_id"),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column(
            "payment_status",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'unpaid'"),
        ),
        sa.Column("qr_path", sa.String(1000), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id", name="pk_participants"),
        sa.ForeignKeyConstraint(
            ["event_id"],
            ["events.id"],
            name="fk_participants_event_id__events",
            ondelete="CASCADE",
        ),
        sa.CheckConstraint(
            "payment_status IN ('unpaid', 'pending', 'paid')",
            name="ck_participants_payment_status",
        ),
    )
    op.create_index("ix_participants_event_id", "participants", ["event_id"])

    # =========================================================
    # 4) CANJES (append-only) + REVOCACIONES
    # =========================================================
    op.create_table(
        "action_logs",
        _uuid("id"),
        _uuid("participant_id"),
        _uuid("action_id"),
        _uuid("verified_by"),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id", name="pk_action_logs"),
        sa.ForeignKeyConstraint(
            ["participant_id"],
            ["participants.id"],
            name="fk_action_logs_participant_id__participants",
        ),
        sa.ForeignKeyConstraint(
            ["action_id"],
            ["event_actions.id"],
            name="fk_action_logs_action_id__event_actions",
        ),
        sa.ForeignKeyConstraint(
            ["verified_by"],
            ["users.id"],
            name="fk_action_logs_verified_by__users",
        ),
        # Invariante central: a lo sumo un canje por (participante, acción).
        sa.UniqueConstraint(
            "participant_id", "action_id", name="uq_action_logs_participant_action"
        ),
    )
    op.create_index("ix_action_logs_action_id", "action_logs", ["action_id"])
    op.create_index("ix_action_logs_verified_by", "action_logs", ["verified_by"])
    op.create_index("ix_action_logs_verified_at", "action_logs", ["verified_at"])

    op.create_table(
        "action_log_revocations",
        _uuid("id"),
        _uuid("action_log_id"),
        _uuid("reverted_by"),
        sa.Column("reason", sa.String(500), nullable=True),
        sa.Column(
            "reverted_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_action_log_revocations"),
        sa.ForeignKeyConstraint(
            ["action_log_id"],
            ["action_logs.id"],
            name="fk_action_log_revocations_action_log_id__action_logs",
        ),
        sa.ForeignKeyConstraint(
            ["reverted_by"],
            ["users.id"],
            name="fk_action_log_revocations_reverted_by__users",
        ),
        sa.UniqueConstraint(
            "action_log_id", name="uq_action_log_revocations_action_log_id"
        ),
    )


def downgrade() -> None:
    """
    Downgrade NO soportado para la migración fundacional.

    Para resetear el entorno local: recrear la base y correr `alembic upgrade head`.
    """
    raise NotImplementedError(
        "Baseline: downgrade no soportado por política. "
        "Para resetear la base de datos, recrearla y migrar desde cero."
    )
