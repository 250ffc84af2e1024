"""University recruitment events: filtering, CSV import, click analytics and admin data access."""
