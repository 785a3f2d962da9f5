"""Document sync: refresh-cycle controller and document stores."""
