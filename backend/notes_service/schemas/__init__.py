# Schemas package: pydantic payload models and the schema registry
