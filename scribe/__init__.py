# Meeting Scribe - Source Package
#
# Modules:
#   - config: Configuration constants and settings
#   - errors: Error taxonomy and classification
#   - notices: User-facing notifications
#   - models: Wire and value models
#   - utils: Shared formatting functions
#   - auth: Streamlit sign-in
#   - capture: Microphone session and size tracking
#   - database: Supabase storage and transcription records
#   - llm: LLM clients and generation functions
#   - processing: Audio helpers, fallback transcripts, gateway client, pipeline
#   - gateway: process-audio service
#   - insights: Heuristic analysis, summary, actions, chat
#   - cli: Command-line recorder
