"""SQLite database schema definitions."""

SCHEMA_SQL = """
-- Body measurements; each metric column is optional so one row can hold
-- whatever was measured at that moment
CREATE TABLE IF NOT EXISTS body_measurements (
    measurement_id INTEGER PRIMARY KEY AUTOINCREMENT,
    measured_at TIMESTAMP NOT NULL,
    weight_kg REAL,
    waist_cm REAL,
    body_fat_pct REAL,
    bmi REAL,
    muscle_mass_kg REAL,
    notes TEXT,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_body_measurements_measured_at
    ON body_measurements(measured_at);
"""


def get_schema_sql() -> str:
    """Return the complete schema SQL."""
    return SCHEMA_SQL
