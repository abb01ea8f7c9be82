"""Fleet input parsers: flat snapshot CSVs and data-store JSON records."""
