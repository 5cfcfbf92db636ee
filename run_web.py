#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
웹 버전 MLFQ 스케줄러 시뮬레이터 실행 파일
서버 시작 후 브라우저에서 API 문서가 자동으로 열립니다.
"""

import subprocess
import sys
import os
import time
import webbrowser
import socket


def is_port_in_use(port):
    """포트가 사용 중인지 확인"""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        return s.connect_ex(('localhost', port)) == 0


def main():
    port = 8000
    url = f"http://localhost:{port}/docs"

    # 프로젝트 루트 기준으로 서버 실행
    script_dir = os.path.dirname(os.path.abspath(__file__))

    print("=" * 60)
    print("       MLFQ 스케줄러 시뮬레이터 - 웹 버전")
    print("=" * 60)

    if is_port_in_use(port):
        print(f"\n[오류] 포트 {port}이 이미 사용 중입니다.")
        sys.exit(1)

    print(f"\n서버 시작 중... (포트: {port})")

    process = subprocess.Popen(
        [sys.executable, "-m", "uvicorn", "web.backend.app:app", "--host", "0.0.0.0", "--port", str(port)],
        cwd=script_dir,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True
    )

    # 서버가 시작될 때까지 대기
    print("\n서버 준비 중...")
    for _ in range(10):
        time.sleep(0.5)
        if is_port_in_use(port):
            break

    if not is_port_in_use(port):
        print("\n[오류] 서버 시작에 실패했습니다.")
        print("   uvicorn이 설치되어 있는지 확인하세요: pip install uvicorn")
        process.terminate()
        sys.exit(1)

    print("\n서버가 시작되었습니다!")
    print(f"브라우저에서 열기: {url}")
    print("\n" + "-" * 60)
    print("종료하려면 Ctrl+C를 누르세요.")
    print("-" * 60 + "\n")

    webbrowser.open(url)

    try:
        while True:
            output = process.stdout.readline()
            if output:
                print(output.strip())
            elif process.poll() is not None:
                break
    except KeyboardInterrupt:
        print("\n\n서버를 종료합니다...")
        process.terminate()
        process.wait()
        print("종료되었습니다.")


if __name__ == "__main__":
    main()
