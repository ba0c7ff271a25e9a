"""Init DB

Revision ID: 5d2c8e41b7a9
Revises:
Create Date: 2026-10-19 10:12:44.318205

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5d2c8e41b7a9"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "forms",
        sa.Column("id", sa.VARCHAR(), nullable=False),
        sa.Column("title", sa.VARCHAR(), nullable=False),
        sa.Column("description", sa.VARCHAR(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "form_fields",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("form_id", sa.VARCHAR(), nullable=False),
        sa.Column("field_id", sa.VARCHAR(), nullable=False),
        sa.Column(
            "field_type",
            sa.Enum(
                "text",
                "textarea",
                "select",
                "checkbox",
                "radio",
                name="form_field_type",
            ),
            nullable=False,
        ),
        sa.Column("label", sa.VARCHAR(), nullable=False),
        sa.Column("placeholder", sa.VARCHAR(), nullable=True),
        sa.Column("is_required", sa.BOOLEAN(), nullable=False),
        sa.Column("options", sa.JSON(), nullable=True),
        sa.Column("field_order", sa.INTEGER(), nullable=False),
        sa.Column("position", sa.INTEGER(), nullable=False),
        sa.ForeignKeyConstraint(["form_id"], ["forms.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_form_fields_form_id", "form_fields", ["form_id"])
    op.create_index("ix_form_fields_field_id", "form_fields", ["field_id"])

    # Submissions outlive their form, so no foreign key
    op.create_table(
        "submissions",
        sa.Column("id", sa.VARCHAR(), nullable=False),
        sa.Column("form_id", sa.VARCHAR(), nullable=False),
        sa.Column("data", sa.JSON(), nullable=True),
        sa.Column("submitted_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_submissions_form_id", "submissions", ["form_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_submissions_form_id", table_name="submissions")
    op.drop_table("submissions")
    op.drop_index("ix_form_fields_field_id", table_name="form_fields")
    op.drop_index("ix_form_fields_form_id", table_name="form_fields")
    op.drop_table("form_fields")
    op.drop_table("forms")
    sa.Enum(name="form_field_type").drop(op.get_bind(), checkfirst=True)
