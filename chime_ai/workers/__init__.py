"""Workers package: statement ingestion."""
