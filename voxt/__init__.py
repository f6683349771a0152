"""voxt - metered voice transcription and chat summaries for Telegram groups."""
