"""almanac - calendar feed ingestion and due-date scheduling."""
