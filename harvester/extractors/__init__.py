"""Reading from the ord source: fetcher, typed endpoints, enumeration, aggregation."""
