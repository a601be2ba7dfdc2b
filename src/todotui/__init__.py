"""todotui - terminal task manager for todo.txt lists."""
