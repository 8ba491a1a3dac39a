"""Wind-elongated fire-front spread model and animator."""
