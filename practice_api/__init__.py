"""Practice API: patient discharge-request workflow and notifications."""
