"""Runtime interaction with a running engine: port layout and the control client."""
