"""Application-side helpers shared by manageable tools."""
