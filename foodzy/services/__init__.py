"""
                        Services Module

Contains all business logic services with the hybrid architecture pattern.
Each hosted provider has a Mock/Local (development) and Real (production)
implementation.

Services:
    - gateway: SQLite/Postgres locally, Supabase in production
    - email: SendGrid bulk email
    - assistant: HuggingFace chat model and the ordering assistant
    - translation: LibreTranslate
    - voice: browser speech transcripts
"""
