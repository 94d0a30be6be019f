"""Foundation - errors and configuration shared by the runtime."""
