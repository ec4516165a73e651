"""In-app notification store and the fan-out dispatcher."""
