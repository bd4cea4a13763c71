# Supabase table: sessions
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

sessions:
- id: uuid (primary key, default: gen_random_uuid())
- user_id: uuid (not null, references users.id on delete cascade)
- expiration_date: timestamp with time zone (not null)
- created_at: timestamp (default: now())

A fresh row is created on every successful login. The browser only holds the
session id, inside the signed en_session cookie; a row past its
expiration_date no longer authenticates anybody.
"""
