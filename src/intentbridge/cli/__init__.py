"""Command-line interface for IntentBridge."""
