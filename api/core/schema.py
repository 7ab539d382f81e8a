"""
Table definitions, applied idempotently on startup by `db.ensure_schema()`.

Adoption requests reference users and pets with ON DELETE CASCADE so that
deleting either side never leaves dangling requests behind.
"""

DDL = """
CREATE TABLE IF NOT EXISTS users (
    id            text PRIMARY KEY,
    first_name    text NOT NULL,
    last_name     text NOT NULL,
    email         text NOT NULL,
    password_hash text NOT NULL,
    role          text NOT NULL DEFAULT 'user' CHECK (role IN ('user', 'admin')),
    age           integer CHECK (age IS NULL OR age >= 0),
    created_at    timestamptz NOT NULL DEFAULT now(),
    updated_at    timestamptz NOT NULL DEFAULT now()
);

CREATE UNIQUE INDEX IF NOT EXISTS users_email_lower_uq ON users (lower(email));

CREATE TABLE IF NOT EXISTS pets (
    id          text PRIMARY KEY,
    name        text NOT NULL,
    species     text NOT NULL,
    breed       text,
    age         integer CHECK (age IS NULL OR age >= 0),
    description text,
    image_url   text,
    status      text NOT NULL DEFAULT 'available' CHECK (status IN ('available', 'adopted')),
    created_at  timestamptz NOT NULL DEFAULT now(),
    updated_at  timestamptz NOT NULL DEFAULT now()
);

CREATE INDEX IF NOT EXISTS pets_status_idx ON pets (status);

CREATE TABLE IF NOT EXISTS adoption_requests (
    id         text PRIMARY KEY,
    user_id    text NOT NULL REFERENCES users (id) ON DELETE CASCADE,
    pet_id     text NOT NULL REFERENCES pets (id) ON DELETE CASCADE,
    status     text NOT NULL DEFAULT 'pending' CHECK (status IN ('pending', 'approved', 'rejected')),
    created_at timestamptz NOT NULL DEFAULT now(),
    updated_at timestamptz NOT NULL DEFAULT now()
);

CREATE INDEX IF NOT EXISTS adoption_requests_user_idx ON adoption_requests (user_id);
CREATE INDEX IF NOT EXISTS adoption_requests_pet_idx ON adoption_requests (pet_id);
"""
