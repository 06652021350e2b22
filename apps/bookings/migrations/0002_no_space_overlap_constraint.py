"""PostgreSQL exclusion constraint against overlapping bookings of one space.

The row lock taken by the store serialises creates per space; this
constraint is the database-level guarantee that survives code paths
which bypass the store. ``tstzrange(start, end, '[)')`` has the same
half-open semantics as ``TimeInterval.overlaps``: a booking ending at
10:00 does not collide with one starting at 10:00.

Other database vendors skip this migration.
"""

from django.db import migrations

CONSTRAINT = "booking_no_space_overlap"


def add_constraint(apps, schema_editor):
    if schema_editor.connection.vendor != "postgresql":
        return
    schema_editor.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
    schema_editor.execute(
        f"ALTER TABLE bookings_booking ADD CONSTRAINT {CONSTRAINT} "
        "EXCLUDE USING gist (space_id WITH =, tstzrange(start_time, end_time, '[)') WITH &&)"
    )


def drop_constraint(apps, schema_editor):
    if schema_editor.connection.vendor != "postgresql":
        return
    schema_editor.execute(f"ALTER TABLE bookings_booking DROP CONSTRAINT IF EXISTS {CONSTRAINT}")


class Migration(migrations.Migration):

    dependencies = [
        ("bookings", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(add_constraint, drop_constraint),
    ]
