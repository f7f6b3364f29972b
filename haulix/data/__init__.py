"""Domain data for the dispatch tracker."""
