"""Journal storage backends (ibis-framework, Polars)."""
