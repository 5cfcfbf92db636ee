#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
MLFQ 스케줄러 시뮬레이터 - 메인 실행 파일
"""

import sys
import os
import traceback

from core.scheduler_base import SchedulerConfig
from schedulers import MLFQScheduler
from utils.input_parser import InputParser
from utils.visualization import Visualizer


# 반복 실행 제한 (끝나지 않는 입력 대비)
CLI_MAX_TIME = 100000


def print_banner():
    """배너 출력"""
    print("\n" + "="*80)
    print(" "*22 + "MLFQ (다단계 피드백 큐) 스케줄러 시뮬레이터")
    print("="*80 + "\n")


def print_config(config: SchedulerConfig):
    """스케줄러 설정 출력"""
    print("\n" + "-"*80)
    print("스케줄러 설정")
    print("-"*80)
    for level in range(config.priority_levels):
        print(f"  Queue {level}: 퀀텀 {config.quantum_for(level)}")
    print(f"  Blocking Queue: 예산 {config.blocking_quantum}")
    print(f"  틱 (반복당 타임 슬라이스): {config.tick}")
    print("-"*80)


def read_int(prompt: str, default: int) -> int:
    """양의 정수 입력 (엔터는 기본값)"""
    while True:
        raw = input(f"{prompt} (기본값={default}): ").strip()
        if not raw:
            return default
        try:
            value = int(raw)
        except ValueError:
            print("[오류] 정수를 입력하세요.")
            continue
        if value <= 0:
            print("[오류] 양수를 입력하세요.")
            continue
        return value


def select_config() -> SchedulerConfig:
    """설정 선택 (기본값 또는 사용자 정의)"""
    choice = input("\n기본 설정을 사용하시겠습니까? (y/n, 기본값=y): ").strip().lower()
    if choice != 'n':
        return SchedulerConfig(max_time=CLI_MAX_TIME)

    while True:
        try:
            return SchedulerConfig(
                priority_levels=read_int("우선순위 단계 수", 3),
                base_quantum=read_int("Queue 0 퀀텀", 10),
                quantum_step=read_int("단계별 퀀텀 증가량", 20),
                blocking_quantum=read_int("블로킹 큐 예산", 50),
                tick=read_int("틱", 10),
                max_time=CLI_MAX_TIME
            )
        except ValueError as e:
            print(f"[오류] 잘못된 설정: {e}")


def select_input_file():
    """입력 파일 선택"""
    print("\n" + "="*80)
    print("입력 선택")
    print("="*80)

    script_dir = os.path.dirname(os.path.abspath(__file__))
    data_dir = os.path.join(script_dir, "data")

    print("\n[입력 옵션]")
    print("  1. 랜덤 데이터 (자동 생성) - generated_input.txt")
    print("  2. 사용자 정의 데이터 (data/ 디렉토리에서 선택)")
    print("="*80)

    while True:
        choice = input("\n입력 옵션 선택 (1-2): ").strip()

        if choice == '1':
            return "GENERATE_RANDOM"

        elif choice == '2':
            if not os.path.exists(data_dir):
                print("[오류] data/ 디렉토리를 찾을 수 없습니다.")
                continue

            files = sorted(f for f in os.listdir(data_dir) if f.endswith('.txt'))
            if not files:
                print("[오류] data/ 디렉토리에 .txt 파일이 없습니다.")
                continue

            print("\n" + "-"*80)
            print("data/ 디렉토리의 사용 가능한 파일:")
            for i, file in enumerate(files, 1):
                print(f"  {i}. {file}")
            print("-"*80)

            file_choice = input("파일 번호 선택: ").strip()
            try:
                idx = int(file_choice) - 1
            except ValueError:
                print("[오류] 잘못된 입력입니다.")
                continue
            if 0 <= idx < len(files):
                return os.path.join(data_dir, files[idx])
            print("[오류] 잘못된 파일 번호입니다.")

        else:
            print("[오류] 잘못된 선택입니다. 1 또는 2를 입력하세요.")


def load_processes():
    """입력 선택에 따라 프로세스 로드"""
    input_file = select_input_file()

    if input_file == "GENERATE_RANDOM":
        print("\n[정보] 랜덤 프로세스 생성 중...")
        processes = InputParser.generate_random_processes(num_processes=10)
        script_dir = os.path.dirname(os.path.abspath(__file__))
        generated_file = os.path.join(script_dir, "data", "generated_input.txt")
        os.makedirs(os.path.dirname(generated_file), exist_ok=True)
        InputParser.save_processes_to_file(processes, generated_file)
        return processes

    print(f"\n'{input_file}'에서 프로세스 로딩 중...")
    return InputParser.parse_file(input_file)


def save_results(result, config: SchedulerConfig, output_dir="simulation_results"):
    """결과 출력 및 저장"""
    os.makedirs(output_dir, exist_ok=True)

    visualizer = Visualizer()
    visualizer.print_statistics_table([result])
    visualizer.print_process_details(result)

    print("Gantt 차트 생성 중...")
    visualizer.draw_gantt_chart(result['gantt_chart'], result['algorithm'],
                                save_path=os.path.join(output_dir, "gantt_mlfq.png"), show=False)
    visualizer.draw_queue_levels(result['gantt_chart'], config.priority_levels,
                                 save_path=os.path.join(output_dir, "queue_levels.png"), show=False)

    results_file = os.path.join(output_dir, "results.txt")
    save_results_to_file(result, results_file)

    print(f"\n{'='*80}")
    print("시뮬레이션 완료")
    print(f"{'='*80}")
    print(f"\n결과가 '{output_dir}/' 디렉토리에 저장되었습니다:")
    print("  - Gantt 차트: gantt_mlfq.png")
    print("  - 큐 단계 그래프: queue_levels.png")
    print("  - 상세 결과: results.txt")
    print("="*80 + "\n")


def save_results_to_file(result, filename):
    """결과를 텍스트 파일로 저장"""
    stats = result['statistics']

    with open(filename, 'w', encoding='utf-8') as f:
        f.write("="*100 + "\n")
        f.write(f"{result['algorithm']} 시뮬레이션 결과\n")
        f.write("="*100 + "\n\n")

        f.write(f"평균 대기 시간: {stats['avg_waiting_time']:.2f}\n")
        f.write(f"평균 반환 시간: {stats['avg_turnaround_time']:.2f}\n")
        f.write(f"평균 응답 시간: {stats['avg_response_time']:.2f}\n")
        f.write(f"CPU 이용률(%): {stats['cpu_utilization']:.2f}\n")
        f.write(f"문맥 교환: {stats['context_switches']}\n")
        f.write(f"강등: {stats['demotions']}\n")
        f.write(f"I/O 완료: {stats['io_completions']}\n\n")

        f.write("프로세스 상세 정보:\n")
        f.write("-"*100 + "\n")
        f.write(f"{'PID':<6} {'CPU':>8} {'I/O':>8} {'시작':>8} {'완료':>8} "
                f"{'대기':>8} {'반환':>8} {'응답':>8} {'강등':>6}\n")
        f.write("-"*100 + "\n")

        for process in sorted(result['processes'], key=lambda p: p.pid):
            f.write(f"{process.pid:<6} "
                    f"{process.cpu_time:>8} "
                    f"{process.blocked_time:>8} "
                    f"{process.start_time:>8} "
                    f"{process.finish_time:>8} "
                    f"{process.waiting_time:>8} "
                    f"{process.turnaround_time:>8} "
                    f"{process.response_time:>8} "
                    f"{process.demotions:>6}\n")

        f.write("\n이벤트 로그:\n")
        f.write("-"*100 + "\n")
        for log in result['event_log']:
            f.write(log + "\n")

    print(f"[완료] 결과가 {filename}에 저장되었습니다")


def main():
    """메인 함수"""
    print_banner()

    processes = load_processes()
    if not processes:
        print("\n[오류] 프로세스 로드 실패 또는 파일이 비어있습니다.")
        sys.exit(1)

    InputParser.print_process_summary(processes)

    while True:
        config = select_config()
        print_config(config)

        scheduler = MLFQScheduler(processes, config)
        result = scheduler.run(verbose=True)
        save_results(result, config)

        print("\n" + "="*80)
        continue_choice = input("다른 설정으로 실행하시겠습니까? (y/n): ").strip().lower()
        if continue_choice != 'y':
            print("\nMLFQ 스케줄러 시뮬레이터를 사용해 주셔서 감사합니다!")
            print("="*80 + "\n")
            break


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\n사용자에 의해 시뮬레이션이 중단되었습니다.")
        print("="*80 + "\n")
        sys.exit(0)
    except Exception as e:
        print(f"\n\n[오류] 예기치 않은 오류: {e}")
        traceback.print_exc()
        sys.exit(1)
