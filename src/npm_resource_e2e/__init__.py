"""End-to-end harness for the npm Concourse resource."""
