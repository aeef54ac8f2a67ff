"""reservation slot guard

Revision ID: 3c1f9a7d52e4
Revises:
Create Date: 2025-06-01 09:12:44.381502

"""
from pathlib import Path
from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = '3c1f9a7d52e4'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    project_root = Path(__file__).resolve().parents[2]
    sql_dir = project_root / "sql"

    for filename in ("001_extensions.sql", "010_schema.sql"):
        op.execute((sql_dir / filename).read_text())


def downgrade() -> None:
    op.drop_index("reservation_payment_ref_idx", table_name="reservation")
    op.drop_index("reservation_date_idx", table_name="reservation")
    op.drop_index("reservation_slot_guard", table_name="reservation")
    op.drop_table("reservation", schema="public")
