"""Asset metadata schema resolution engine."""
