import requests

BASE_URL = "http://127.0.0.1:8000/api/v1"
SHOWTIME_ID = "S1"  # created by seed_demo.py

def login_or_register(email, password, full_name):
    response = requests.post(
        f"{BASE_URL}/auth/register",
        json={"email": email, "password": password, "full_name": full_name},
    )
    if response.status_code == 400:
        # Login if exists
        response = requests.post(f"{BASE_URL}/auth/login", data={"username": email, "password": password})
    response.raise_for_status()
    return {"Authorization": f"Bearer {response.json()['access_token']}"}

def debug_double_booking():
    first = login_or_register("first@example.com", "password123", "First User")
    second = login_or_register("second@example.com", "password123", "Second User")

    seats = [f"{SHOWTIME_ID}_A_1", f"{SHOWTIME_ID}_A_2"]

    # 1. First user books A1, A2
    response = requests.post(f"{BASE_URL}/bookings/", json={"showtime_id": SHOWTIME_ID, "seat_ids": seats}, headers=first)
    print(f"First booking: {response.status_code} {response.text}")
    booking_id = response.json().get("id")

    # 2. Second user tries A1 (expect 409)
    response = requests.post(f"{BASE_URL}/bookings/", json={"showtime_id": SHOWTIME_ID, "seat_ids": seats[:1]}, headers=second)
    print(f"Second booking: {response.status_code} {response.text}")

    # 3. First user cancels, seats come back
    if booking_id:
        response = requests.patch(f"{BASE_URL}/bookings/{booking_id}/cancel", headers=first)
        print(f"Cancel: {response.status_code} {response.text}")

    response = requests.get(f"{BASE_URL}/showtimes/{SHOWTIME_ID}/seat-map")
    print(f"Available seats after cancel: {response.json()['available_seats']}")

if __name__ == "__main__":
    debug_double_booking()
