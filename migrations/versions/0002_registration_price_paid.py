"""store the price paid per registration

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-20 09:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0002"
down_revision = "0001"
branch_labels = None
depends_on = None


def upgrade():
    with op.batch_alter_table("registrations") as batch_op:
        batch_op.add_column(sa.Column("price_paid", sa.Float(), nullable=False, server_default="0"))

    # Confirmed seats booked before this column existed paid the event's current price
    op.execute(
        "UPDATE registrations SET price_paid = "
        "(SELECT price FROM events WHERE events.id = registrations.event_id) "
        "WHERE status = 'CONFIRMED'"
    )


def downgrade():
    with op.batch_alter_table("registrations") as batch_op:
        batch_op.drop_column("price_paid")
