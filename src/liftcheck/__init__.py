"""LiftCheck: peer validation of shared lifts and scoped leaderboards."""
