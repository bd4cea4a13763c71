# Supabase table: users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

users:
- id: uuid (primary key, default: gen_random_uuid())
- email: text (unique, not null) - stored lower-cased
- username: text (unique, not null)
- name: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Users are created by onboarding. The login callback only reads this table,
matching on the lower-cased email of the provider profile.
"""
