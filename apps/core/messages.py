"""
User-facing messages for API responses and notifications.

These messages are designed to be:
- Simple and jargon-free
- Specific about what the user can do next
- Consistent between the services and the HTTP layer
"""

# ============================================
# Availability Slot Messages
# ============================================

SLOTS = {
    'providers_only': "Only providers can manage availability.",
    'end_before_start': "End time must be after start time.",
    'not_found': "Work shift not found.",
    'has_bookings': "Cannot edit a shift that already has bookings.",
    'start_in_past': "Cannot edit a time slot in the past. The start time must be after the current time.",
    'overlaps_existing': "This time range overlaps another of your shifts on the same day.",
    'has_active_appointments': "This work shift has pending appointments and cannot be deleted.",
    'updated': "Time slot updated successfully.",
    'deleted': "Work shift deleted successfully.",
    'created': "Successfully created {created} work shifts.",
    'skipped_duplicates': " Skipped {skipped} duplicate shifts.",
    'skipped_past': " Skipped {past} shifts because the time has already passed.",
}

# ============================================
# Appointment Messages
# ============================================

APPOINTMENTS = {
    # Booking
    'customers_only': "Only customers can book appointments.",
    'invalid_duration': "Duration must be one of: {allowed} minutes.",
    'note_too_short': "Please describe your request in at least {min_length} characters.",
    'missing_field': "The {field} field is required.",
    'slot_not_found': "Time slot not found.",
    'provider_inactive': "This provider is currently inactive.",
    'slot_expired': "This time slot has already expired. Please go back and select a future time.",
    'outside_slot': "The requested time does not fit inside this availability window.",
    'already_booked': "This time slot is already booked.",
    'booked': "Appointment request sent. The provider will confirm shortly.",
    'storage_failed': "We couldn't save your booking. Please try again.",

    # Lookup / authorization
    'not_found': "Appointment not found.",
    'not_your_appointment': "You do not have permission to act on this appointment.",

    # Provider decision
    'invalid_action': "Action must be either 'approve' or 'reject'.",
    'already_resolved': "This appointment is already {status}. Your action cannot be completed.",
    'confirmed': "Appointment confirmed successfully.",
    'declined_refund': "Appointment declined. Refund is being processed.",
    'declined': "Appointment declined.",
    'decline_note': " | [Provider]: Sorry, I cannot accept this appointment at the moment.",

    # Customer cancellation
    'reason_too_short': "Please give a cancellation reason of at least {min_length} characters.",
    'reason_too_long': "The cancellation reason must be at most {max_length} characters.",
    'not_cancellable': "The appointment is not in a cancellable state.",
    'cancel_deadline_passed': (
        "The cancellation deadline has passed "
        "(cancellations must be made at least 24 hours before the appointment)."
    ),
    'cancelled_refund': (
        "The cancellation request has been processed successfully. "
        "The 10% service fee was applied. Refund is pending."
    ),
    'cancelled': "The appointment has been successfully cancelled.",
    'cancel_note': "\n--- [CUSTOMER CANCELLED] ({timestamp}) ---\nReason: {reason}",

    # Completion
    'not_confirmed': "Appointment not confirmed or paid.",
    'not_ended': "Consultation time has not ended yet.",
    'completed': "Appointment completed.",
}

# ============================================
# Notification Texts
# ============================================

NOTIFICATIONS = {
    'new_request': "You have a new appointment request #{appointment_id}.",
    'request_received': "Your appointment request #{appointment_id} was sent and is awaiting confirmation.",
    'confirmed': "Your provider confirmed appointment #{appointment_id}.",
    'declined_refund': "Your provider declined appointment #{appointment_id}. Refund is being processed.",
    'declined': "Your provider was unable to accept request #{appointment_id}.",
    'cancelled_by_customer': "Appointment #{appointment_id} was cancelled by the customer.",
    'cancel_acknowledged': "Your cancellation of appointment #{appointment_id} has been recorded.",
    'expired_refund': "Appointment #{appointment_id} has expired (not confirmed). Refund pending.",
    'completed_review': "Appointment #{appointment_id} completed. Please leave a review for {provider_name}.",
}

# ============================================
# Notification Links (frontend routes)
# ============================================

LINKS = {
    'provider_appointments': "/provider/appointments",
    'customer_appointment': "/customer/my-appointments/{appointment_id}",
    'provider_review': "/providers/{provider_id}/review",
}

# ============================================
# Notification Center Messages
# ============================================

NOTIFICATIONS_API = {
    'not_found': "Notification not found.",
    'deleted': "Notification deleted.",
    'all_deleted': "All notifications deleted.",
    'all_read': "All notifications marked as read.",
}
