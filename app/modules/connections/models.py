# Supabase table: connections
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

connections:
- id: uuid (primary key, default: gen_random_uuid())
- provider_name: text (not null) - one of the supported providers, e.g. "github"
- provider_id: text (not null) - the user's id at the provider
- user_id: uuid (not null, references users.id on delete cascade)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Constraints:
- unique (provider_name, provider_id): one external identity links to one user.
  Concurrent inserts of the same identity are serialized by this constraint;
  the losing insert fails and the error propagates to the caller.

Rows are never updated by the callback flow; they are created when an identity
is first linked and deleted from the connections settings page.
"""
