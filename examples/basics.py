from obstable import Container

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Wrapping nested data")
print("-" * 100)
print()

# Every nested dict and list becomes its own observable container.
profile = Container({"name": "Alice", "address": {"city": "Paris"}, "tags": ["admin"]})

log_profile = lambda: print(f"Profile changed: {profile.serialize()}")
log_address = lambda: print(f"Address changed: {profile.address.serialize()}")

profile.subscribe(log_profile)
profile.address.subscribe(log_address)

# Changes bubble up: the address listener runs first, then the profile listener.
profile.address.city = "Berlin"

# Writing the value a key already holds does nothing.
profile.address.city = "Berlin"

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Structural operations")
print("-" * 100)
print()

tags = profile.tags
tags.insert("editor")
tags.insert("viewer")
tags.sort()
print(f"Tags: {tags.concat(', ')}")

tags.remove("editor")
print(f"Tags after remove: {tags.unpack()}")

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Lifecycle")
print("-" * 100)
print()

snapshot = profile.clone()
profile.freeze()

try:
    profile.name = "Bob"
except Exception as e:
    print(f"Frozen: {type(e).__name__}: {e}")

# Freezing is per container, so nested sections stay writable.
profile.address.city = "Rome"

profile.unsubscribe(log_profile)
print(f"Snapshot still holds: {snapshot.serialize()}")
profile.destroy()
snapshot.destroy()
