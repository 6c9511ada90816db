"""Calendar views and web surface for the clinic appointment store."""
