"""HTTP handlers: DRF views, serializers, authentication and error mapping."""
